from sitemap_updater.cli import main

from .conftest import touch


def site_args(site):
    return ["--source-dir", str(site), "--base-url", "https://www.example.com"]


def test_add_page_without_filename_prints_usage(capsys):
    assert main(["add-page"]) == 1
    assert "Usage: sitemap-updater add-page" in capsys.readouterr().out


def test_add_page(site, capsys):
    code = main(site_args(site) + ["add-page", "portafolio.html", "0.9", "monthly"])
    assert code == 0
    assert "Page added" in capsys.readouterr().out
    xml = (site / "sitemap.xml").read_text(encoding="utf-8")
    assert "<loc>https://www.example.com/portafolio.html</loc>" in xml
    assert "<priority>0.9</priority>" in xml


def test_add_page_invalid_priority(site, capsys):
    assert main(site_args(site) + ["add-page", "x.html", "9"]) == 1
    assert "Error adding the page" in capsys.readouterr().err
    assert not (site / "sitemap.xml").exists()


def test_update(site, capsys):
    touch(site, "blog.html")
    assert main(site_args(site) + ["update"]) == 0
    assert "2 pages" in capsys.readouterr().out
    assert (site / "sitemap.xml").exists()


def test_update_writes_to_output(site, tmp_path):
    output = tmp_path / "public" / "sitemap.xml"
    output.parent.mkdir()
    assert main(site_args(site) + ["--output", str(output), "update"]) == 0
    assert output.exists()
    assert not (site / "sitemap.xml").exists()


def test_update_failure(tmp_path, capsys):
    code = main(["--source-dir", str(tmp_path / "missing"), "update"])
    assert code == 1
    assert "Error" in capsys.readouterr().err


def test_status(site, capsys):
    touch(site, "contacto.html")
    assert main(site_args(site) + ["status"]) == 0
    out = capsys.readouterr().out
    assert "2 pages" in out
    assert "https://www.example.com/contacto.html" in out
    assert not (site / "sitemap.xml").exists()
