"""y = x1 + x2 * sin(x2 + x3 ** 3).

Build the graph bottom-up; every intermediate node is an ordinary handle that
can be evaluated or inspected on its own.

Run with:
    compgraph eval examples/trig.py -i examples/trig_inputs.toml
"""

import compgraph as cg

x1 = cg.Input("x1")
x2 = cg.Input("x2")
x3 = cg.Input("x3")

cube = cg.Power(x3, 3.0)
inner = cg.Add(x2, cube)
wave = cg.Sine(inner)
scaled = cg.Multiply(x2, wave)

graph = cg.Add(x1, scaled)
