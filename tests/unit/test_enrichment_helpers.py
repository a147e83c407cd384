from expocrm.services.enrichment_service import (
    email_domain,
    extract_linkedin_url,
    is_corporate_domain,
    normalize_contact_data,
    overall_confidence,
    says_null,
)


def test_email_domain():
    assert email_domain("Ana@Acme.Test") == "acme.test"
    assert email_domain("no-at-sign") is None
    assert email_domain(None) is None


def test_free_mail_is_not_corporate():
    assert is_corporate_domain("acme.test")
    assert not is_corporate_domain("gmail.com")
    assert not is_corporate_domain(None)


def test_extract_linkedin_url_only_personal_profiles():
    text = "See https://www.linkedin.com/company/acme and https://linkedin.com/in/ana-lopez-42 for more"
    assert extract_linkedin_url(text) == "https://linkedin.com/in/ana-lopez-42"
    assert extract_linkedin_url("https://linkedin.com/company/acme") is None


def test_says_null():
    assert says_null("")
    assert says_null("NULL")
    assert not says_null("https://acme.test")


def test_overall_confidence_is_mean():
    assert overall_confidence({"website": 0.95, "linkedin_url": 0.0, "industry": 0.7}) == 0.55
    assert overall_confidence({}) is None


def test_normalize_contact_data_accepts_camel_case():
    data = normalize_contact_data({"name": " Ana Lopez ", "jobTitle": "CTO"})
    assert data == {"name": "Ana Lopez", "company": None, "email": None, "job_title": "CTO"}
