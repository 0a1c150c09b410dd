import json

from cli import main


def test_collect_writes_schemas(shop_root, tmp_path, capsys):
	destination = tmp_path / "out" / "models.json"
	options = tmp_path / "options.json"
	options.write_text(
		json.dumps(
			{
				"source": str(shop_root),
				"modules": ["shop/*.py"],
				"destination": str(destination),
				"entry_markers": ["Controller"],
			}
		)
	)
	assert main(["collect", "--config", str(options)]) == 0
	schemas = json.loads(destination.read_text())
	assert [s["$id"] for s in schemas] == [
		"shop.models.Entity",
		"shop.models.LineItem",
		"shop.models.Order",
		"shop.models.Person",
	]
	out = capsys.readouterr().out
	assert "Found 1 entry models." in out
	assert "Found 1 used models." in out
	assert "Generating 4 models." in out
	assert "Completed in" in out


def test_collect_with_flags_only_and_verbose(shop_root, tmp_path, capsys):
	destination = tmp_path / "models.json"
	code = main(
		[
			"collect",
			"--source", str(shop_root),
			"--destination", str(destination),
			"--marker", "Controller",
			"--verbose",
		]
	)
	assert code == 0
	assert "\tOrderService" in capsys.readouterr().out


def test_configuration_error_exit_code(tmp_path, capsys):
	assert main(["collect", "--source", str(tmp_path), "--destination", "x.json"]) == 2
	assert "Configuration error" in capsys.readouterr().err


def test_output_error_exit_code(shop_root, capsys):
	code = main(["collect", "--source", str(shop_root), "--destination", str(shop_root), "--marker", "Controller"])
	assert code == 1
	assert "Output error" in capsys.readouterr().err
