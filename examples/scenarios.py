"""Example expression trees for memocalc.

Evaluate any of them from the command line:

    memocalc eval examples/scenarios.py --name simple
    memocalc show examples.scenarios:complex_tree

Numbers in the comments name the operations in the diagrams of each tree.
"""

import memocalc as mc
from memocalc import add, constant, exponentiate, modulo, multiply

_TWO = constant(2)
_TEN = constant(10)

# -----------------------------------------------------------------------------
# Simple: no repeated sub-calculations
#
#                (1) +
#                   / \
#              (2) *   \
#                 / \   \
#            (3) +   2   * (4)
#               / \     / \
#          (5) ^   2   2   ^ (6)
#             / \         / \
#            2   10     10   2
# -----------------------------------------------------------------------------

simple: mc.Node = add(
    multiply(
        add(exponentiate(_TWO, _TEN), _TWO),
        _TWO,
    ),
    multiply(_TWO, exponentiate(_TEN, _TWO)),
)

# -----------------------------------------------------------------------------
# Medium: an exponent tower, 2 ^ (2 ^ (2 * 10)), reduced by the modulus
# -----------------------------------------------------------------------------

medium: mc.Node = add(
    multiply(
        add(
            multiply(
                multiply(
                    add(_TWO, _TWO),
                    exponentiate(_TWO, exponentiate(_TWO, multiply(_TWO, _TEN))),
                ),
                _TEN,
            ),
            _TWO,
        ),
        _TWO,
    ),
    constant(0),
)

# -----------------------------------------------------------------------------
# Complex: the right branch repeats the exponent tower of the left branch with
# swapped commutative operands (10 + 5 instead of 5 + 10), so five of its
# calculations are cache hits.
# -----------------------------------------------------------------------------


def _tower(inner: mc.Node) -> mc.Node:
    return exponentiate(_TWO, exponentiate(_TWO, multiply(_TWO, inner)))


complex_tree: mc.Node = modulo(
    add(
        multiply(
            add(
                multiply(
                    multiply(add(_TWO, _TWO), _tower(add(constant(5), _TEN))),
                    _TEN,
                ),
                _TWO,
            ),
            _TWO,
        ),
        add(
            _TWO,
            add(
                _TEN,
                multiply(
                    multiply(_TWO, _TWO),
                    _tower(add(_TEN, constant(5))),
                ),
            ),
        ),
    ),
    add(constant(1), exponentiate(_TWO, multiply(_TWO, _TEN))),
)

# -----------------------------------------------------------------------------
# Duplicated: two separately built 2 ^ 10 nodes share one cache entry
# -----------------------------------------------------------------------------

duplicated: mc.Node = add(
    exponentiate(constant(2), constant(10)),
    exponentiate(constant(2), constant(10)),
)
