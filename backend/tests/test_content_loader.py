from schoolsite.models.content import SiteContent
from schoolsite.services.content_loader import load_site_content


def test_bundled_sections_load(db):
    created = load_site_content(db)

    keys = {section.section_key for section in created}
    assert {"hero", "about", "programs", "contact"} <= keys
    hero = db.query(SiteContent).filter(SiteContent.section_key == "hero").one()
    assert hero.extra_data["ctaButtons"][0]["link"] == "/admission"


def test_existing_sections_are_not_overwritten(db, tmp_path):
    (tmp_path / "about.yaml").write_text("section_key: about\ntitle: Default title\n")
    db.add(SiteContent(section_key="about", title="Edited by admin"))
    db.commit()

    assert load_site_content(db, tmp_path) == []
    assert db.query(SiteContent).filter(SiteContent.section_key == "about").one().title == "Edited by admin"


def test_bad_files_are_skipped(db, tmp_path):
    (tmp_path / "broken.yaml").write_text("section_key: [unclosed\n")
    (tmp_path / "nokey.yaml").write_text("title: Orphan\n")
    (tmp_path / "good.yaml").write_text("section_key: good\nsubtitle: Fine\n")

    created = load_site_content(db, tmp_path)

    assert [section.section_key for section in created] == ["good"]
    assert db.query(SiteContent).count() == 1


def test_missing_directory(db, tmp_path):
    assert load_site_content(db, tmp_path / "absent") == []
