"""The same kind of graph written with Python operators.

Several outputs can share intermediate nodes; `compgraph eval` reports each
output in its own column.

Run with:
    compgraph eval examples/operators.py --graph outputs -i examples/operators_inputs.toml
"""

import compgraph as cg

radius = cg.Input("radius")
angle = cg.Input("angle")

area = 3.141592653589793 * radius**2
height = radius * cg.sin(angle)

outputs = {
    "area": area,
    "height": height,
    "area_plus_height": area + height,
}
