def test_import_package_and_version_smoke():
    import sfrest

    assert isinstance(sfrest.__version__, str)
    assert sfrest.API_VERSION == "v61.0"
    assert sfrest.SalesforceAPI.__name__ == "SalesforceAPI"


def test_main_module_runs_cli(monkeypatch):
    import sfrest.__main__ as entry

    calls = []
    monkeypatch.setattr(entry, "_configure_stdio", lambda: calls.append("stdio"))
    monkeypatch.setattr(entry, "cli", lambda: calls.append("cli"))

    entry.main()

    assert calls == ["stdio", "cli"]
