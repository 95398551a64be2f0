import pytest

from study_assistant.domain.models.generation import GatewayConfig
from study_assistant.services.generation_settings import GenerationSettingsService
from study_assistant.services.text_generation import TextGenerationGateway

from conftest import make_completion

pytestmark = pytest.mark.api

VALID_PAYMENT = {
    "card_number": "4532 0151 1283 0366",
    "expiry_date": "12/99",
    "cvv": "123",
    "cardholder_name": "Ivan Petrov",
    "email": "ivan@example.com",
    "plan_id": "premium",
    "amount": 2990,
}


@pytest.fixture
def configured_client(client, openai_client):
    container = client.app.state.container
    service = GenerationSettingsService(
        container.store,
        GatewayConfig(api_key="sk-test-key-0000000000"),
        gateway_factory=lambda config: TextGenerationGateway(config, client=openai_client),
    )
    service.initialize()
    container.generation_settings = service
    return client


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"ok": True, "generation_configured": False}


def test_list_plans(client):
    plans = {plan["plan_id"]: plan for plan in client.get("/api/payments/plans").json()}

    assert plans["premium"]["duration_months"] == 12
    assert plans["basic"]["plan_name"] == "Базовый"


@pytest.mark.payment
def test_payment_activates_subscription(client):
    response = client.post("/api/payments", json=VALID_PAYMENT)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["transaction_id"].startswith("tx_")

    active = client.get("/api/subscriptions/active").json()
    assert active["plan_id"] == "premium"
    assert active["status"] == "active"
    assert active["is_active"] is True


@pytest.mark.payment
def test_payment_accepts_unmasked_expiry(client):
    response = client.post("/api/payments", json=dict(VALID_PAYMENT, expiry_date="1299"))

    assert response.status_code == 200
    assert response.json()["success"] is True


@pytest.mark.payment
def test_payment_form_errors_are_field_level(client):
    payload = dict(VALID_PAYMENT, card_number="4532015112830367", cvv="12", email="nope")

    response = client.post("/api/payments", json=payload)

    assert response.status_code == 422
    errors = response.json()["detail"]["errors"]
    assert errors == {
        "cardNumber": "Неверный номер карты",
        "cvv": "CVV должен содержать 3-4 цифры",
        "email": "Укажите корректный email",
    }
    assert client.get("/api/subscriptions").json()["count"] == 0


def test_cancel_subscription_flow(client):
    client.post("/api/payments", json=VALID_PAYMENT)
    subscription_id = client.get("/api/subscriptions").json()["items"][0]["id"]

    assert client.post("/api/subscriptions/sub_missing/cancel").status_code == 404
    response = client.post(f"/api/subscriptions/{subscription_id}/cancel")

    assert response.status_code == 200
    item = client.get("/api/subscriptions").json()["items"][0]
    assert item["status"] == "cancelled"
    assert item["auto_renew"] is False
    assert client.get("/api/subscriptions/active").json() is None


def test_api_key_crud(client):
    created = client.post("/api/projects/proj_1/api-keys", json={"name": "Диплом"})
    assert created.status_code == 201
    body = created.json()
    key_id = body["id"]
    assert body["key"].startswith("sk-")
    assert body["key_preview"] == body["key"][:8] + "*" * (len(body["key"]) - 12) + body["key"][-4:]

    listed = client.get("/api/projects/proj_1/api-keys").json()
    assert listed["count"] == 1
    assert "key" not in listed["items"][0]
    assert client.get("/api/projects/other/api-keys").json()["count"] == 0

    updated = client.patch(f"/api/api-keys/{key_id}", json={"is_active": False})
    assert updated.json()["is_active"] is False
    assert updated.json()["name"] == "Диплом"

    usage = client.get(f"/api/api-keys/{key_id}/usage", params={"days": 3}).json()
    assert len(usage["daily_usage"]) == 3
    assert usage["total_cost_display"].startswith("$")
    assert client.get(f"/api/api-keys/{key_id}").json()["usage"]["requests"] == usage["total_requests"]

    assert client.delete(f"/api/api-keys/{key_id}").status_code == 204
    assert client.delete(f"/api/api-keys/{key_id}").status_code == 404
    assert client.get(f"/api/api-keys/{key_id}").status_code == 404
    assert client.patch(f"/api/api-keys/{key_id}", json={"name": "x"}).status_code == 404


def test_generation_requires_configuration(client):
    response = client.post("/api/generation/homework", json={"subject": "a", "level": "b", "task": "c"})

    assert response.status_code == 409


def test_generate_academic_work(configured_client):
    response = configured_client.post(
        "/api/generation/academic-work",
        json={"work_type": "реферат", "topic": "Космос", "pages": "12"},
    )

    assert response.status_code == 200
    assert response.json() == {"text": "Готовый текст"}


def test_generation_failure_is_localized(configured_client, openai_client):
    from openai import OpenAIError

    openai_client.chat.completions.create.side_effect = OpenAIError("down")

    response = configured_client.post(
        "/api/generation/homework", json={"subject": "a", "level": "b", "task": "c"}
    )

    assert response.status_code == 502
    assert "Проверьте настройки API" in response.json()["detail"]


def test_plagiarism_endpoint(configured_client):
    response = configured_client.post("/api/generation/plagiarism", json={"text": ""})

    assert response.status_code == 200
    assert 70 <= response.json()["uniqueness_score"] <= 100


def test_chat_extracts_work_request(configured_client, openai_client):
    openai_client.chat.completions.create.return_value = make_completion(
        'Принято.[EXTRACTED_DATA]{"workType": "essay", "topic": "Осень", '
        '"requirements": "", "pages": "5"}[/EXTRACTED_DATA]'
    )

    response = configured_client.post(
        "/api/generation/chat", json={"messages": [{"role": "user", "content": "Нужно эссе про осень"}]}
    )

    body = response.json()
    assert body["extraction"] == "parsed"
    assert body["content"] == "Принято."
    assert body["work_request"]["work_type"] == "essay"
    sent = openai_client.chat.completions.create.await_args.kwargs["messages"]
    assert sent[0]["role"] == "system"
    assert sent[1] == {"role": "user", "content": "Нужно эссе про осень"}


def test_settings_roundtrip(client):
    assert client.get("/api/settings/openai").json()["configured"] is False

    response = client.put(
        "/api/settings/openai",
        json={"api_key": "sk-abcdefghijklmnopqrstuvwxyz", "model": "gpt-3.5-turbo", "max_tokens": 1000},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["configured"] is True
    assert body["model"] == "gpt-3.5-turbo"
    assert body["max_tokens"] == 1000
    assert body["api_key_preview"].startswith("sk-abcde")

    assert client.put("/api/settings/openai", json={"api_key": "sk-x", "model": "llama"}).status_code == 422

    assert client.delete("/api/settings/openai").status_code == 204
    assert client.get("/api/settings/openai").json()["configured"] is False


def test_settings_test_connection(configured_client):
    response = configured_client.post("/api/settings/openai/test", json={})

    assert response.json() == {"success": True, "message": "Подключение успешно"}
    assert configured_client.post("/api/settings/openai/test", json={"api_key": "  "}).status_code == 400
