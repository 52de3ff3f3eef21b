"""Unit tests for title normalization."""

from portfolio_manager.kernel.models import Category, Portfolio, Section, normalize_title


class TestNormalizeTitle:
    
    def test_case_and_whitespace_are_ignored(self):
        """Normalization folds case and trims padding."""
        assert normalize_title("  Intro ") == normalize_title("intro")
        assert normalize_title("INTRO") == "intro"
    
    def test_distinct_titles_stay_distinct(self):
        """Different titles keep different keys."""
        assert normalize_title("Intro") != normalize_title("Intro 2")
    
    def test_none_is_empty(self):
        """None normalizes to an empty key."""
        assert normalize_title(None) == ""


class TestTitleKeySync:
    """Models keep title_key in step with title."""
    
    def test_on_construction(self):
        """title_key is set when the model is built."""
        assert Portfolio(title=" My Work ", owner_id="u1").title_key == "my work"
    
    def test_on_rename(self):
        """title_key follows a rename."""
        section = Section(title="Intro", portfolio_id=1, owner_id="u1")
        section.title = "About"
        
        assert section.title_key == "about"
    
    def test_category(self):
        """Categories keep a title_key too."""
        assert Category(title="Web", portfolio_id=1, owner_id="u1").title_key == "web"
