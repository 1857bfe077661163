"""Tests for reading [tool.memocalc] from pyproject.toml."""

from pathlib import Path

import pytest

from memocalc._cli.config import ConfigError, ExpressionRef, MemocalcConfig, find_pyproject_toml, get_config, load_config


def write_pyproject(directory: Path, body: str) -> Path:
    pyproject = directory / "pyproject.toml"
    pyproject.write_text(body)
    return pyproject


class TestExpressionRef:
    """Tests for parsing expression references."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("examples.scenarios:simple", ExpressionRef("examples.scenarios", "simple")),
            ("examples.scenarios", ExpressionRef("examples.scenarios")),
            ("trees.py", ExpressionRef(Path("trees.py"))),
            ("trees.py:tree", ExpressionRef(Path("trees.py"), "tree")),
            ("dir/trees", ExpressionRef(Path("dir/trees"))),
        ],
    )
    def test_parse(self, text: str, expected: ExpressionRef) -> None:
        assert ExpressionRef.parse(text) == expected

    def test_explicit_name_overrides_suffix(self) -> None:
        assert ExpressionRef.parse("examples.scenarios:simple", "medium").name == "medium"

    def test_suffix_that_is_not_a_variable_stays_in_target(self) -> None:
        ref = ExpressionRef.parse(r"C:\trees.py")
        assert ref == ExpressionRef(Path(r"C:\trees.py"))

    def test_str(self) -> None:
        assert str(ExpressionRef("pkg.trees", "tree")) == "pkg.trees:tree"
        assert str(ExpressionRef("pkg.trees")) == "pkg.trees"


class TestExpressionKey:
    """Tests for [tool.memocalc].expression."""

    def test_module_reference(self, tmp_path: Path) -> None:
        config = load_config(write_pyproject(tmp_path, '[tool.memocalc]\nexpression = "pkg.trees:tree"\n'))
        assert config.expression == ExpressionRef("pkg.trees", "tree")

    def test_script_string_is_rooted_at_pyproject(self, tmp_path: Path) -> None:
        config = load_config(write_pyproject(tmp_path, '[tool.memocalc]\nexpression = "trees.py:tree"\n'))
        assert config.expression == ExpressionRef(tmp_path / "trees.py", "tree")

    def test_script_table(self, tmp_path: Path) -> None:
        config = load_config(
            write_pyproject(tmp_path, '[tool.memocalc]\nexpression = { script = "sub/trees.py", name = "big" }\n'),
        )
        assert config.expression == ExpressionRef(tmp_path / "sub" / "trees.py", "big")

    def test_script_table_without_name(self, tmp_path: Path) -> None:
        config = load_config(write_pyproject(tmp_path, '[tool.memocalc]\nexpression = { script = "trees.py" }\n'))
        assert config.expression == ExpressionRef(tmp_path / "trees.py")

    def test_absolute_script_is_kept(self, tmp_path: Path) -> None:
        script = tmp_path / "elsewhere" / "trees.py"
        pyproject = write_pyproject(tmp_path, f"[tool.memocalc]\nexpression = {{ script = '{script}' }}\n")
        config = load_config(pyproject)
        assert config.expression == ExpressionRef(script)

    @pytest.mark.parametrize(
        "value",
        [
            "1",
            '{ name = "tree" }',
            '{ script = "trees.py", name = 3 }',
            '{ script = "trees.py", extra = true }',
        ],
    )
    def test_malformed_expression(self, tmp_path: Path, value: str) -> None:
        pyproject = write_pyproject(tmp_path, f"[tool.memocalc]\nexpression = {value}\n")
        with pytest.raises(ConfigError, match=r"expression must be"):
            load_config(pyproject)


class TestOutputKey:
    """Tests for [tool.memocalc].output."""

    def test_relative_output(self, tmp_path: Path) -> None:
        config = load_config(write_pyproject(tmp_path, '[tool.memocalc]\noutput = "build/report.toml"\n'))
        assert config.output == tmp_path / "build" / "report.toml"
        assert config.expression is None

    def test_non_string_output(self, tmp_path: Path) -> None:
        pyproject = write_pyproject(tmp_path, "[tool.memocalc]\noutput = 123\n")
        with pytest.raises(ConfigError, match="output must be a path string, got int"):
            load_config(pyproject)


class TestLoadConfig:
    """Tests for locating and validating the table as a whole."""

    def test_missing_table(self, tmp_path: Path) -> None:
        config = load_config(write_pyproject(tmp_path, "[project]\nname = 'trees'\n"))
        assert config == MemocalcConfig(root=tmp_path)

    def test_unknown_keys(self, tmp_path: Path) -> None:
        pyproject = write_pyproject(tmp_path, '[tool.memocalc]\ninput = "x"\ncache = "y"\n')
        with pytest.raises(ConfigError, match="Unknown .* keys: cache, input"):
            load_config(pyproject)

    def test_table_of_wrong_type(self, tmp_path: Path) -> None:
        pyproject = write_pyproject(tmp_path, '[tool]\nmemocalc = "trees:tree"\n')
        with pytest.raises(ConfigError, match="must be a table"):
            load_config(pyproject)

    def test_invalid_toml(self, tmp_path: Path) -> None:
        pyproject = write_pyproject(tmp_path, "[tool.memocalc\n")
        with pytest.raises(ConfigError, match="Invalid TOML"):
            load_config(pyproject)

    def test_find_walks_up(self, tmp_path: Path) -> None:
        pyproject = write_pyproject(tmp_path, "")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_pyproject_toml(nested) == pyproject

    def test_get_config_from_nested_cwd(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        write_pyproject(tmp_path, '[tool.memocalc]\nexpression = "pkg.trees:tree"\n')
        nested = tmp_path / "nested"
        nested.mkdir()
        monkeypatch.chdir(nested)

        config = get_config()

        assert config.expression == ExpressionRef("pkg.trees", "tree")
        assert config.root == tmp_path.resolve()
