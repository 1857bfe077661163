"""Tests for expression tree nodes and the construction API."""

import pytest

from memocalc import (
    Internal,
    Leaf,
    MalformedTreeError,
    Operation,
    add,
    constant,
    exponentiate,
    modulo,
    multiply,
)


class TestConstruction:
    """Tests for the node builders."""

    def test_constant_builds_leaf(self) -> None:
        node = constant(7)
        assert node == Leaf(7)
        assert node.value == 7

    @pytest.mark.parametrize(
        ("builder", "operation"),
        [
            (add, Operation.ADD),
            (multiply, Operation.MULTIPLY),
            (modulo, Operation.MODULO),
            (exponentiate, Operation.EXPONENTIATE),
        ],
    )
    def test_builders_tag_operation(self, builder, operation: Operation) -> None:  # noqa: ANN001
        left, right = constant(1), constant(2)
        node = builder(left, right)
        assert isinstance(node, Internal)
        assert node.operation is operation
        assert node.left is left
        assert node.right is right

    def test_structurally_equal_trees_compare_equal(self) -> None:
        assert add(constant(1), constant(2)) == add(constant(1), constant(2))
        assert add(constant(1), constant(2)) != add(constant(2), constant(1))

    def test_nodes_are_frozen(self) -> None:
        node = add(constant(1), constant(2))
        with pytest.raises(AttributeError):
            node.left = constant(3)  # type: ignore[misc]

    def test_big_integer_leaf(self) -> None:
        assert constant(10**100).value == 10**100


class TestMalformedTrees:
    """Tests for structural validation at construction time."""

    def test_missing_child(self) -> None:
        with pytest.raises(MalformedTreeError, match="missing its right child"):
            add(constant(1), None)  # type: ignore[arg-type]

    def test_missing_left_child(self) -> None:
        with pytest.raises(MalformedTreeError, match="missing its left child"):
            Internal(Operation.MODULO, None, constant(1))  # type: ignore[arg-type]

    def test_non_node_child(self) -> None:
        with pytest.raises(MalformedTreeError, match="expected a Node"):
            multiply(constant(1), 2)  # type: ignore[arg-type]

    def test_non_operation(self) -> None:
        with pytest.raises(MalformedTreeError, match="must be an Operation"):
            Internal("+", constant(1), constant(2))  # type: ignore[arg-type]

    @pytest.mark.parametrize("value", [1.5, "3", None, True])
    def test_non_integer_leaf(self, value: object) -> None:
        with pytest.raises(MalformedTreeError, match="Leaf value must be an int"):
            constant(value)  # type: ignore[arg-type]

    def test_malformed_tree_error_is_type_error(self) -> None:
        with pytest.raises(TypeError):
            constant("x")  # type: ignore[arg-type]


class TestTreeHelpers:
    """Tests for size, depth, iteration and rendering."""

    @pytest.fixture
    def tree(self) -> Internal:
        # (2 ^ 10) + (3 * 4)
        node = add(exponentiate(constant(2), constant(10)), multiply(constant(3), constant(4)))
        assert isinstance(node, Internal)
        return node

    def test_size(self, tree: Internal) -> None:
        assert tree.size() == 7
        assert constant(1).size() == 1

    def test_depth(self, tree: Internal) -> None:
        assert tree.depth() == 3
        assert constant(1).depth() == 1
        assert add(constant(1), add(constant(2), add(constant(3), constant(4)))).depth() == 4

    def test_iter_nodes_is_post_order(self, tree: Internal) -> None:
        rendered = [str(node) for node in tree.iter_nodes()]
        assert rendered == ["2", "10", "(2 ^ 10)", "3", "4", "(3 * 4)", "((2 ^ 10) + (3 * 4))"]

    def test_str(self) -> None:
        assert str(modulo(constant(-7), constant(3))) == "(-7 % 3)"

    def test_helpers_on_deep_chain(self) -> None:
        tree = constant(0)
        for _ in range(5000):
            tree = add(tree, constant(1))

        assert tree.size() == 10001
        assert tree.depth() == 5001
        assert sum(1 for _ in tree.iter_nodes()) == 10001
        assert str(tree).startswith("((((0 + 1) + 1)")
