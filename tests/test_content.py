"""
Integration tests for content generation endpoints.
"""
from content_agent.db.models.generated_content import GeneratedContent
from content_agent.db.models.usage import UsageLog
from content_agent.llm.mock_provider import MockProvider
from content_agent.llm.prompts import enhance_image_prompt, get_system_prompt, DEFAULT_SYSTEM_PROMPT
from content_agent.services.content_service import keyword_density
from content_agent.services.usage_service import log_usage, current_usage


def _create_project(client, headers, **overrides):
    payload = {"title": "Launch post", "content_type": "article", "content": "draft"}
    payload.update(overrides)
    return client.post("/api/projects", json=payload, headers=headers).json()


def test_generate_text_logs_words(client, db, test_user, auth_headers, provider):
    response = client.post(
        "/api/content/generate-text",
        json={"type": "article", "prompt": "Solar power for homeowners"},
        headers=auth_headers,
    )

    assert response.status_code == 200, response.text
    data = response.json()
    assert "Solar power for homeowners" in data["content"]
    assert data["word_count"] == len(data["content"].split())
    assert data["tokens_used"] == data["usage"]["total_tokens"] > 0
    assert provider.chat_calls == 1

    db.expire_all()
    assert current_usage(db, test_user)["words"] == data["word_count"]
    record = db.query(GeneratedContent).filter(GeneratedContent.id == data["id"]).one()
    assert record.kind == "text"
    assert record.content == data["content"]


def test_generate_text_updates_project(client, db, auth_headers):
    project = _create_project(client, auth_headers)

    response = client.post(
        "/api/content/generate-text",
        json={"type": "email", "prompt": "Spring sale", "project_id": project["id"]},
        headers=auth_headers,
    )
    assert response.status_code == 200

    updated = client.get(f"/api/projects/{project['id']}", headers=auth_headers).json()
    assert updated["content"] == response.json()["content"]
    assert updated["word_count"] == response.json()["word_count"]
    assert updated["status"] == "completed"

    db.expire_all()
    entry = db.query(UsageLog).one()
    assert entry.project_id == project["id"]


def test_quota_exceeded_skips_provider_and_usage(client, db, test_user, auth_headers, provider):
    """Test a user at the word limit gets 429, the provider is not called and nothing is logged."""
    log_usage(db, test_user.id, "words", 10000)

    response = client.post(
        "/api/content/generate-text",
        json={"type": "article", "prompt": "Anything"},
        headers=auth_headers,
    )

    assert response.status_code == 429
    body = response.json()
    assert body["error"] == "quota_exceeded"
    assert body["limit"] == 10000
    assert body["remaining"] == 0
    assert provider.chat_calls == 0

    db.expire_all()
    assert db.query(UsageLog).count() == 1
    assert db.query(GeneratedContent).count() == 0


def test_one_word_left_still_generates(client, db, test_user, auth_headers):
    """Test the pre-check needs only one word of headroom; the full output is logged."""
    log_usage(db, test_user.id, "words", 9999)

    response = client.post(
        "/api/content/generate-text",
        json={"type": "social_post", "prompt": "Launch day"},
        headers=auth_headers,
    )

    assert response.status_code == 200
    db.expire_all()
    assert current_usage(db, test_user)["words"] == 9999 + response.json()["word_count"]


def test_foreign_project_rejected_before_provider(client, auth_headers, other_user_headers, provider):
    project = _create_project(client, other_user_headers)

    response = client.post(
        "/api/content/generate-text",
        json={"type": "article", "prompt": "Hijack", "project_id": project["id"]},
        headers=auth_headers,
    )

    assert response.status_code == 403
    assert provider.chat_calls == 0


def test_missing_project_rejected_before_provider(client, auth_headers, provider):
    response = client.post(
        "/api/content/generate-text",
        json={"type": "article", "prompt": "Hello", "project_id": "missing"},
        headers=auth_headers,
    )

    assert response.status_code == 404
    assert provider.chat_calls == 0


def test_blank_prompt_rejected(client, auth_headers, provider):
    response = client.post(
        "/api/content/generate-text", json={"type": "article", "prompt": "   "}, headers=auth_headers
    )
    assert response.status_code == 400
    assert provider.chat_calls == 0


def test_provider_failure_returns_502_without_usage(client, db, auth_headers, provider):
    provider.fail = True

    response = client.post(
        "/api/content/generate-text", json={"type": "article", "prompt": "Hello"}, headers=auth_headers
    )

    assert response.status_code == 502
    assert response.json()["error"] == "upstream_error"
    assert "upstream unavailable" not in response.json()["detail"]
    db.expire_all()
    assert db.query(UsageLog).count() == 0


def test_generate_image_appends_to_project(client, db, test_user, auth_headers, provider):
    project = _create_project(client, auth_headers, metadata={"tone": "bold"})

    response = client.post(
        "/api/content/generate-image",
        json={"prompt": "A mountain lake", "style": "photographic", "project_id": project["id"]},
        headers=auth_headers,
    )

    assert response.status_code == 200, response.text
    data = response.json()
    assert data["original_prompt"] == "A mountain lake"
    assert data["prompt"] == enhance_image_prompt("A mountain lake", "photographic")
    assert data["image_url"].startswith("https://")
    assert provider.image_calls == 1

    updated = client.get(f"/api/projects/{project['id']}", headers=auth_headers).json()
    assert updated["metadata"] == {"tone": "bold", "generated_images": [data["image_url"]]}

    db.expire_all()
    assert current_usage(db, test_user)["images"] == 1


def test_generate_image_unknown_style(client, auth_headers, provider):
    response = client.post(
        "/api/content/generate-image", json={"prompt": "A cat", "style": "watercolor"}, headers=auth_headers
    )
    assert response.status_code == 400
    assert provider.image_calls == 0


def test_image_quota_exceeded(client, db, test_user, auth_headers, provider):
    log_usage(db, test_user.id, "images", 50)

    response = client.post("/api/content/generate-image", json={"prompt": "A cat"}, headers=auth_headers)

    assert response.status_code == 429
    assert response.json()["resource_type"] == "images"
    assert provider.image_calls == 0


def test_history_get_and_delete(client, auth_headers, other_user_headers):
    client.post("/api/content/generate-text", json={"type": "email", "prompt": "One"}, headers=auth_headers)
    client.post("/api/content/generate-image", json={"prompt": "Two"}, headers=auth_headers)

    history = client.get("/api/content/history", headers=auth_headers).json()
    assert history["total"] == 2
    assert history["page"] == 1

    images = client.get("/api/content/history", params={"kind": "image"}, headers=auth_headers).json()
    assert images["total"] == 1
    content_id = images["items"][0]["id"]

    assert client.get(f"/api/content/{content_id}", headers=auth_headers).json()["kind"] == "image"
    assert client.get(f"/api/content/{content_id}", headers=other_user_headers).status_code == 403
    assert client.delete(f"/api/content/{content_id}", headers=other_user_headers).status_code == 403

    assert client.delete(f"/api/content/{content_id}", headers=auth_headers).status_code == 204
    assert client.get(f"/api/content/{content_id}", headers=auth_headers).status_code == 404

    # Deleting history does not refund usage
    usage = client.get("/api/usage/current", headers=auth_headers).json()
    assert usage["resources"]["images"]["used"] == 1


def test_templates_are_public(client):
    response = client.get("/api/content/templates")

    assert response.status_code == 200
    templates = response.json()
    assert {t["id"] for t in templates} >= {"blog-post", "social-media", "product-description", "email-newsletter"}


def test_analyze_seo(client, auth_headers):
    response = client.post(
        "/api/content/analyze-seo",
        json={"content": "Solar panels cut bills. Solar is clean.", "target_keywords": ["solar", "wind"]},
        headers=auth_headers,
    )

    assert response.status_code == 200
    data = response.json()
    assert data["seo_score"] == 72
    assert data["keyword_density"] == {"solar": 28.57, "wind": 0.0}
    assert data["missing_elements"] == ["meta description"]


def test_analyze_seo_non_json_fallback(app, client, auth_headers):
    class PlainTextProvider(MockProvider):
        def chat(self, messages, model="mock-text", temperature=0.7, max_tokens=None, **kwargs):
            response = super().chat(messages, model=model, temperature=temperature, max_tokens=max_tokens)
            response.content = "Looks decent overall."
            return response

    app.state.llm_provider = PlainTextProvider(delay_min=0, delay_max=0)

    response = client.post("/api/content/analyze-seo", json={"content": "Short text"}, headers=auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["seo_score"] == 75
    assert data["analysis"] == "Looks decent overall."


def test_keyword_density_is_case_insensitive():
    assert keyword_density("Coffee beans and COFFEE cups", ["coffee"]) == {"coffee": 40.0}
    assert keyword_density("", ["coffee"]) == {"coffee": 0.0}


def test_unknown_content_type_uses_default_instruction():
    assert get_system_prompt("limerick") == DEFAULT_SYSTEM_PROMPT
    assert get_system_prompt(None) == DEFAULT_SYSTEM_PROMPT


def test_mock_provider_is_deterministic():
    provider = MockProvider(delay_min=0, delay_max=0)
    messages = [{"role": "system", "content": get_system_prompt("article")}, {"role": "user", "content": "Tea"}]

    assert provider.chat(messages).content == provider.chat(messages).content
