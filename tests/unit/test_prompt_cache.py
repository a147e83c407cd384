from expocrm.config import Config
from expocrm.services.prompt_cache import PromptCache


def test_render_fills_placeholders(tmp_path):
    (tmp_path / "greeting.txt").write_text("Hello $name from $company.\n$missing", encoding="utf-8")
    cache = PromptCache(str(tmp_path))

    assert cache.render("greeting", name="Ana", company=None) == "Hello Ana from .\n$missing"


def test_prompt_is_read_once(tmp_path):
    path = tmp_path / "p.txt"
    path.write_text("first", encoding="utf-8")
    cache = PromptCache(str(tmp_path))

    assert cache.get_prompt("p") == "first"
    path.write_text("second", encoding="utf-8")
    assert cache.get_prompt("p") == "first"


def test_packaged_prompts_exist():
    cache = PromptCache(str(Config.PROMPTS_DIR))
    for name in ("card_analysis", "note_analysis", "meeting_prep", "email_follow_up", "talking_points"):
        assert cache.get_prompt(name)
