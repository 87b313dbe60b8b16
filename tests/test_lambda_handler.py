import pytest

import lambda_main
from domain.common.exceptions import ConnectionGoneException


@pytest.fixture(autouse=True)
def _installed_relay(relay):
    lambda_main.set_services(relay)
    yield
    lambda_main.set_services(None)


def _session(route_key, connection_id="C1", body=None):
    event = {
        "requestContext": {
            "routeKey": route_key,
            "connectionId": connection_id,
            "domainName": "d.example.com",
            "stage": "dev",
        },
    }
    if body is not None:
        event["body"] = body
    return event


def _batch(*bodies):
    return {
        "Records": [
            {"eventSource": "aws:sqs", "messageId": f"m{i}", "body": body}
            for i, body in enumerate(bodies, start=1)
        ]
    }


def test_connect_then_broadcast_reaches_connection(push_hub):
    assert lambda_main.handler(_session("$connect")) == {"statusCode": 200, "body": "Connected"}

    response = lambda_main.handler(_batch("hello"))

    assert response["statusCode"] == 200
    assert response["body"] == "SQS messages processed"
    assert response["batchItemFailures"] == []
    assert push_hub.calls == [
        ("https://abc123.execute-api.us-east-1.amazonaws.com/dev", "C1", {"text": "hello"})
    ]


def test_disconnect_then_broadcast_skips_connection(push_hub):
    lambda_main.handler(_session("$connect", "C1"))
    lambda_main.handler(_session("$connect", "C2"))
    lambda_main.handler(_session("$disconnect", "C1"))

    lambda_main.handler(_batch('{"data": {"n": 1}}'))

    assert push_hub.recipients() == ["C2"]


def test_stale_connection_is_gone_after_one_broadcast(relay, push_hub):
    for cid in ("A", "B"):
        lambda_main.handler(_session("$connect", cid))
    push_hub.failures["A"] = ConnectionGoneException("A")

    lambda_main.handler(_batch("first"))
    push_hub.calls.clear()
    lambda_main.handler(_batch("second"))

    assert push_hub.recipients() == ["B"]


def test_ping_route_replies_on_caller_endpoint(push_hub):
    response = lambda_main.handler(_session("ping"))
    assert response == {"statusCode": 200, "body": "Pong sent"}
    assert push_hub.calls == [("https://d.example.com/dev", "C1", {"action": "pong"})]


def test_invalid_default_body_returns_400():
    response = lambda_main.handler(_session("$default", body="{oops"))
    assert response == {"statusCode": 400, "body": "Invalid message format"}


def test_unknown_event_returns_400():
    assert lambda_main.handler({"foo": "bar"}) == {"statusCode": 400, "body": "Unknown event type"}


def test_handler_accepts_lambda_context(push_hub):
    class Context:
        aws_request_id = "req-123"

    response = lambda_main.handler(_session("$connect"), Context())
    assert response["statusCode"] == 200
