from __future__ import annotations

from fastapi.testclient import TestClient

from funcstack.api.main import create_app
from funcstack.function import Function
from funcstack.functions.schemas import FunctionProps
from funcstack.host.stack import DeploymentUnit


def _client(make_app):
    app = make_app()
    unit = DeploymentUnit(app, "Api")
    node_fn = Function(unit, "Node", FunctionProps(handler="src/node.main", permissions="*"))
    py_fn = Function(unit, "Py", FunctionProps(handler="src/py.main", runtime="python3.9"))
    return TestClient(create_app(app.deployment_pass)), node_fn, py_fn


def test_list_functions(make_app):
    client, node_fn, py_fn = _client(make_app)

    response = client.get("/v1/functions")

    assert response.status_code == 200
    by_address = {f["address"]: f for f in response.json()}
    assert by_address[node_fn.node.addr]["handler"] == "src/node.main"
    assert by_address[node_fn.node.addr]["permissions"] == "*"
    assert by_address[py_fn.node.addr]["runtime"] == "python3.9"


def test_list_functions_filtered(make_app):
    client, _, py_fn = _client(make_app)

    response = client.get("/v1/functions", params={"runtime": "python3.9"})

    assert [f["address"] for f in response.json()] == [py_fn.node.addr]


def test_get_function_and_404(make_app):
    client, node_fn, _ = _client(make_app)

    assert client.get(f"/v1/functions/{node_fn.node.addr}").json()["handler"] == "src/node.main"
    assert client.get("/v1/functions/c8missing").status_code == 404


def test_pass_status_and_health(make_app):
    client, _, _ = _client(make_app)

    status = client.get("/v1/pass").json()
    assert status["pending_tasks"] == 2
    assert status["function_count"] == 2
    assert status["finished"] is False

    assert client.get("/health").json()["status"] == "healthy"
