from collector.fs_scan import module_name_for, parent_module, scan_modules


def _touch(root, rel_path):
	path = root / rel_path
	path.parent.mkdir(parents=True, exist_ok=True)
	path.write_text("")


def test_module_names():
	assert module_name_for("pkg/__init__.py") == "pkg"
	assert module_name_for("my-pkg/mod.py") == "my_pkg.mod"
	assert module_name_for("build/gen.py") is None
	assert module_name_for("__init__.py") == ""
	assert parent_module("pkg.sub.mod") == "pkg.sub"
	assert parent_module("mod") == ""


def test_scan_matches_patterns_and_skips_ignored_dirs(tmp_path):
	for rel_path in [
		"app.py",
		"pkg/__init__.py",
		"pkg/models.py",
		"pkg/notes.txt",
		"build/gen.py",
		".venv/lib/site.py",
	]:
		_touch(tmp_path, rel_path)

	top_level = scan_modules(str(tmp_path), ["*.py"])
	assert [f.module for f in top_level] == ["app"]

	files = scan_modules(str(tmp_path), ["**/*.py", "pkg/*.py"])
	assert [f.rel_path for f in files] == ["app.py", "pkg/__init__.py", "pkg/models.py"]
	init = files[1]
	assert init.module == "pkg"
	assert init.is_package
