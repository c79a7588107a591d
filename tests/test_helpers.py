from utils.helpers import generate_run_id, sanitize_business_name, normalize_domain, truncate_text


def test_run_ids_are_unique():
    assert generate_run_id() != generate_run_id()


def test_normalize_domain():
    assert normalize_domain("https://www.Acme.com/about?x=1") == "acme.com"
    assert normalize_domain("acme.com") == "acme.com"
    assert normalize_domain("   ") == ""


def test_sanitize_business_name():
    assert sanitize_business_name("  Acme   Plumbing ") == "Acme Plumbing"
    assert sanitize_business_name("   ") is None
    assert sanitize_business_name(None) is None


def test_truncate_text():
    assert truncate_text("This is a very long text", max_length=10) == "This is..."
    assert truncate_text("Short", max_length=10) == "Short"
