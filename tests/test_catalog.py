import json

import pytest

from virtual_interviewer.interview import JobCatalog, JobConfigurationError, JobTemplateSchema


def test_default_catalog_has_builtin_roles(catalog):
    assert catalog.keys() == ["junior_dev", "qa", "support"]
    qa = catalog.get("qa")
    assert qa.title == "QA Engineer"
    assert qa.skills == ("testing", "automation", "selenium", "jest", "api")
    assert len(qa.questions) == 3


def test_unknown_key_lists_known_roles(catalog):
    with pytest.raises(JobConfigurationError) as exc_info:
        catalog.get("pilot")
    assert "pilot" in str(exc_info.value)
    assert "junior_dev" in str(exc_info.value)


def test_membership_and_length(catalog):
    assert "support" in catalog
    assert "pilot" not in catalog
    assert len(catalog) == 3


def test_skills_are_normalized_to_lowercase():
    catalog = JobCatalog.from_mapping({
        "data": {"title": "Data Analyst", "skills": [" SQL ", "Python"], "questions": ["Q?"]}
    })
    assert catalog.get("data").skills == ("sql", "python")


@pytest.mark.parametrize("entry", [
    {"title": "", "skills": ["a"], "questions": ["Q?"]},
    {"title": "T", "skills": ["a"], "questions": []},
    {"title": "T", "skills": ["  "], "questions": ["Q?"]},
    {"title": "T", "skills": ["a"], "questions": ["   "]},
    {"skills": ["a"], "questions": ["Q?"]},
])
def test_malformed_templates_are_rejected(entry):
    with pytest.raises(JobConfigurationError):
        JobCatalog.from_mapping({"bad": entry})


def test_empty_mapping_is_rejected():
    with pytest.raises(JobConfigurationError):
        JobCatalog.from_mapping({})


def test_schema_converts_to_template():
    template = JobTemplateSchema(title="T", skills=["Go"], questions=["Why?"]).to_template()
    assert template.skills == ("go",)
    assert template.questions == ("Why?",)


def test_loads_json_file(tmp_path):
    path = tmp_path / "jobs.json"
    path.write_text(json.dumps({
        "sre": {"title": "SRE", "skills": ["kubernetes"], "questions": ["Tell me about an outage."]}
    }))

    catalog = JobCatalog.default(str(path))

    assert catalog.keys() == ["sre"]
    assert catalog.get("sre").title == "SRE"


def test_unreadable_json_file_is_a_configuration_error(tmp_path):
    path = tmp_path / "jobs.json"
    path.write_text("{not json")

    with pytest.raises(JobConfigurationError):
        JobCatalog.from_json_file(str(path))
    with pytest.raises(JobConfigurationError):
        JobCatalog.from_json_file(str(tmp_path / "missing.json"))
