"""Small .tet meshes shared by the tests."""

SINGLE_TRIANGLE = """\
# single triangle in the XY plane
v 0 0 0
v 1 0 0
v 0 1 0
vt 0 0
vt 1 0
vt 0 1
f 1/1 2/2 3/3
t 1 2 3 1
"""

# Face 0 lies in XY (area 0.5, normal +Z), face 1 in XZ (area 1, normal +Y)
TWO_TRIANGLE_FAN = """\
v 0 0 0
v 1 0 0
v 0 1 0
v 0 0 2
f 1 2 3
f 1 4 2
"""

# Closed surface of the unit corner tetrahedron
TETRAHEDRON = """\
v 0 0 0
v 1 0 0
v 0 1 0
v 0 0 1
vt 0 0
vt 1 0
vt 0 1
f 1/1 3/3 2/2
f 1/1 2/2 4/3
f 1/1 4/3 3/3
f 2/2 3/3 4/1
t 1 2 3 4
"""

COLLINEAR = """\
v 0 0 0
v 1 0 0
v 2 0 0
f 1 2 3
"""
