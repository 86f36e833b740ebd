import pytest
from unittest.mock import patch

from app.database import async_session
from app.services import order_service
from factories import insert_car, insert_client, insert_order


async def _car_and_client(**car_fields):
    async with async_session() as db:
        car = await insert_car(db, **car_fields)
        client = await insert_client(db)
    return car, client


@pytest.mark.asyncio
async def test_create_order_success(api):
    car, client = await _car_and_client(price=320.0)

    response = await api.post("/orders", json={
        "carId": car.id,
        "clientId": client.id,
        "zipcode": "01001-000",
        "city": "São Paulo",
        "state": "SP",
    })

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "OPEN"
    assert body["carId"] == car.id
    assert body["clientId"] == client.id
    assert body["totalValue"] == 320.0


@pytest.mark.asyncio
async def test_create_order_missing_car_id(api):
    _, client = await _car_and_client()

    response = await api.post("/orders", json={"clientId": client.id})

    assert response.status_code == 400
    assert response.json() == {"error": "O carro é obrigatório."}


@pytest.mark.asyncio
async def test_create_order_for_unknown_car(api):
    _, client = await _car_and_client()

    response = await api.post("/orders", json={"carId": "missing", "clientId": client.id})

    assert response.status_code == 404
    assert response.json() == {"error": "Carro não encontrado"}


@pytest.mark.asyncio
@pytest.mark.parametrize(("status", "code"), [("DELETED", 404), ("INACTIVED", 400)])
async def test_create_order_for_unavailable_car(api, status, code):
    car, client = await _car_and_client(status=status)

    response = await api.post("/orders", json={"carId": car.id, "clientId": client.id})

    assert response.status_code == code


@pytest.mark.asyncio
async def test_create_order_for_unknown_client(api):
    car, _ = await _car_and_client()

    response = await api.post("/orders", json={"carId": car.id, "clientId": "missing"})

    assert response.status_code == 404
    assert response.json() == {"error": "Cliente não encontrado"}


@pytest.mark.asyncio
async def test_create_order_unexpected_error(api):
    car, client = await _car_and_client()
    with patch.object(order_service, "create_order", side_effect=RuntimeError("boom")):
        response = await api.post("/orders", json={"carId": car.id, "clientId": client.id})

    assert response.status_code == 500
    assert response.json() == {"message": "Erro ao criar pedido"}


@pytest.mark.asyncio
async def test_list_orders_by_client_cpf(api):
    async with async_session() as db:
        car = await insert_car(db)
        client = await insert_client(db)
        other = await insert_client(db)
        first = await insert_order(db, car, client, total_value=100.0)
        second = await insert_order(db, car, client, total_value=200.0)
        await insert_order(db, car, other)

    response = await api.get("/orders", params={"clientCpf": client.cpf, "sort": "totalValue", "order": "asc"})

    assert response.status_code == 200
    assert [o["id"] for o in response.json()] == [first.id, second.id]


@pytest.mark.asyncio
async def test_list_orders_by_status_and_page(api):
    async with async_session() as db:
        car = await insert_car(db)
        client = await insert_client(db)
        for value in (1.0, 2.0, 3.0):
            await insert_order(db, car, client, status="CLOSED", total_value=value)
        await insert_order(db, car, client, status="OPEN")

    response = await api.get("/orders", params={
        "clientCpf": client.cpf,
        "status": "CLOSED",
        "sort": "totalValue",
        "order": "desc",
        "page": 2,
        "limit": 2,
    })

    assert response.status_code == 200
    assert [o["totalValue"] for o in response.json()] == [1.0]


@pytest.mark.asyncio
async def test_list_orders_by_date_range(api):
    async with async_session() as db:
        car = await insert_car(db)
        client = await insert_client(db)
        await insert_order(db, car, client)

    today = (await api.get("/orders", params={"clientCpf": client.cpf})).json()[0]["createdAt"][:10]
    inside = await api.get("/orders", params={"clientCpf": client.cpf, "startDate": today, "endDate": today})
    before = await api.get("/orders", params={"clientCpf": client.cpf, "endDate": "2000-01-01"})

    assert len(inside.json()) == 1
    assert before.json() == []


@pytest.mark.asyncio
async def test_list_orders_rejects_inverted_dates(api):
    response = await api.get("/orders", params={"startDate": "2024-02-01", "endDate": "2024-01-01"})

    assert response.status_code == 400
    assert response.json() == {"message": "A data inicial deve ser anterior à data final."}


@pytest.mark.asyncio
@pytest.mark.parametrize("params", [{"sort": "password"}, {"order": "sideways"}, {"page": 0}, {"status": "LOST"}])
async def test_list_orders_rejects_bad_params(api, params):
    response = await api.get("/orders", params=params)

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_get_order(api):
    async with async_session() as db:
        car = await insert_car(db)
        client = await insert_client(db)
        order = await insert_order(db, car, client)

    response = await api.get(f"/orders/{order.id}")

    assert response.status_code == 200
    assert response.json()["id"] == order.id


@pytest.mark.asyncio
async def test_get_order_not_found(api):
    response = await api.get("/orders/missing")

    assert response.status_code == 404
    assert response.json() == {"error": "Pedido não encontrado"}


@pytest.mark.asyncio
async def test_update_order(api):
    async with async_session() as db:
        car = await insert_car(db)
        client = await insert_client(db)
        order = await insert_order(db, car, client)

    response = await api.put(f"/orders/{order.id}", json={"status": "APPROVED", "city": "Recife"})

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "APPROVED"
    assert body["city"] == "Recife"


@pytest.mark.asyncio
async def test_update_order_rejects_unknown_and_null_fields(api):
    async with async_session() as db:
        car = await insert_car(db)
        client = await insert_client(db)
        order = await insert_order(db, car, client)

    response = await api.put(f"/orders/{order.id}", json={"carId": "other", "totalValue": None})

    assert response.status_code == 400
    errors = response.json()["errors"]
    assert "O campo carId não é permitido." in errors
    assert "O campo total_value não pode ser nulo." in errors


@pytest.mark.asyncio
async def test_update_canceled_order(api):
    async with async_session() as db:
        car = await insert_car(db)
        client = await insert_client(db)
        order = await insert_order(db, car, client, status="CANCELED")

    response = await api.put(f"/orders/{order.id}", json={"status": "OPEN"})

    assert response.status_code == 400
    assert response.json() == {"error": "Pedidos cancelados não podem ser atualizados."}


@pytest.mark.asyncio
async def test_update_order_not_found(api):
    response = await api.put("/orders/missing", json={"city": "Natal"})

    assert response.status_code == 404
    assert response.json() == {"error": "Pedido não encontrado"}


@pytest.mark.asyncio
async def test_delete_order_cancels_it(api):
    async with async_session() as db:
        car = await insert_car(db)
        client = await insert_client(db)
        order = await insert_order(db, car, client)

    response = await api.delete(f"/orders/{order.id}")

    assert response.status_code == 200
    assert response.json()["status"] == "CANCELED"
    assert (await api.delete(f"/orders/{order.id}")).json() == {"error": "Pedido já está cancelado."}


@pytest.mark.asyncio
async def test_canceled_order_no_longer_blocks_car_delete(api):
    async with async_session() as db:
        car = await insert_car(db)
        client = await insert_client(db)
        order = await insert_order(db, car, client)

    await api.delete(f"/orders/{order.id}")
    response = await api.delete(f"/cars/{car.id}")

    assert response.status_code == 200


@pytest.mark.asyncio
async def test_reopen_order_after_car_deleted(api):
    async with async_session() as db:
        car = await insert_car(db)
        client = await insert_client(db)
        order = await insert_order(db, car, client)

    assert (await api.put(f"/orders/{order.id}", json={"status": "CLOSED"})).status_code == 200
    assert (await api.delete(f"/cars/{car.id}")).status_code == 200

    response = await api.put(f"/orders/{order.id}", json={"status": "OPEN"})

    assert response.status_code == 404
    assert response.json() == {"error": "Carro não encontrado"}
    assert (await api.get(f"/orders/{order.id}")).json()["status"] == "CLOSED"


@pytest.mark.asyncio
async def test_reopen_order_for_inactive_car(api):
    async with async_session() as db:
        car = await insert_car(db, status="INACTIVED")
        client = await insert_client(db)
        order = await insert_order(db, car, client, status="CLOSED")

    response = await api.put(f"/orders/{order.id}", json={"status": "OPEN"})

    assert response.status_code == 400
    assert response.json() == {"error": "Carro indisponível para pedidos."}


@pytest.mark.asyncio
async def test_reopen_order_after_client_deleted(api):
    async with async_session() as db:
        car = await insert_car(db)
        client = await insert_client(db)
        order = await insert_order(db, car, client, status="CLOSED")

    assert (await api.delete(f"/clients/{client.id}")).status_code == 200
    response = await api.put(f"/orders/{order.id}", json={"status": "OPEN"})

    assert response.status_code == 404
    assert response.json() == {"error": "Cliente não encontrado"}


@pytest.mark.asyncio
async def test_reopen_order_with_live_car_and_client(api):
    async with async_session() as db:
        car = await insert_car(db)
        client = await insert_client(db)
        order = await insert_order(db, car, client, status="APPROVED")

    response = await api.put(f"/orders/{order.id}", json={"status": "OPEN"})

    assert response.status_code == 200
    assert response.json()["status"] == "OPEN"


@pytest.mark.asyncio
@pytest.mark.parametrize("params", [{"page": "abc"}, {"limit": "many"}])
async def test_list_orders_malformed_numbers_use_message_body(api, params):
    response = await api.get("/orders", params=params)

    assert response.status_code == 400
    assert list(response.json()) == ["message"]
