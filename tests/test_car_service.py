import pytest

from app.models.car import Car
from app.schemas.car import CarCreate, CarListQuery, CarUpdate
from app.services import car_service
from app.utils.exceptions import BlockedTransitionError, ConflictError, NotFoundError, ValidationError
from factories import insert_car, insert_client, insert_order


@pytest.mark.asyncio
async def test_has_open_orders(db_session):
    car = await insert_car(db_session)
    client = await insert_client(db_session)

    assert await car_service.has_open_orders(db_session, car.id) is False

    await insert_order(db_session, car, client, status="CLOSED")
    assert await car_service.has_open_orders(db_session, car.id) is False

    await insert_order(db_session, car, client, status="OPEN")
    assert await car_service.has_open_orders(db_session, car.id) is True


@pytest.mark.asyncio
async def test_create_car_conflicts_with_inactive_car(db_session):
    await insert_car(db_session, status="INACTIVED", plate="ABC1234")

    with pytest.raises(ConflictError, match="Já existe um carro com esta placa"):
        await car_service.create_car(db_session, CarCreate(plate="ABC1234", brand="Fiat", model="Uno"))


@pytest.mark.asyncio
async def test_create_car_ignores_deleted_plate(db_session):
    await insert_car(db_session, status="DELETED", plate="ABC1234")

    car = await car_service.create_car(db_session, CarCreate(plate="ABC1234", brand="Fiat", model="Uno"))

    assert car.status == "ACTIVED"


@pytest.mark.asyncio
async def test_update_car_replaces_items(db_session):
    car = await insert_car(db_session, items=["Rádio"])

    updated = await car_service.update_car(
        db_session, car.id, CarUpdate.from_payload({"plate": "UPD1234", "Items": ["GPS", "Bancos de couro"]})
    )

    assert updated.plate == "UPD1234"
    assert [item.name for item in updated.items] == ["GPS", "Bancos de couro"]

    car_id = car.id
    db_session.expire_all()
    reloaded = await db_session.get(Car, car_id)
    assert [item.name for item in reloaded.items] == ["GPS", "Bancos de couro"]


@pytest.mark.asyncio
async def test_update_without_items_keeps_them(db_session):
    car = await insert_car(db_session, items=["Airbag", "GPS"])

    updated = await car_service.update_car(db_session, car.id, CarUpdate.from_payload({"km": 2000}))

    assert updated.km == 2000
    assert [item.name for item in updated.items] == ["Airbag", "GPS"]


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [{"brand": "Other"}, {"status": "ACTIVED"}, {"Items": []}])
async def test_deleted_car_rejects_any_update(db_session, payload):
    car = await insert_car(db_session, status="DELETED")

    with pytest.raises(BlockedTransitionError, match="Carros com status excluído"):
        await car_service.update_car(db_session, car.id, CarUpdate.from_payload(payload))


@pytest.mark.asyncio
async def test_status_change_to_deleted_blocked_by_open_order(db_session):
    car = await insert_car(db_session)
    client = await insert_client(db_session)
    await insert_order(db_session, car, client)

    with pytest.raises(BlockedTransitionError, match="Há pedidos em aberto"):
        await car_service.update_car(db_session, car.id, CarUpdate.from_payload({"status": "DELETED"}))


@pytest.mark.asyncio
async def test_status_toggles_between_active_and_inactive(db_session):
    car = await insert_car(db_session)

    car = await car_service.update_car(db_session, car.id, CarUpdate.from_payload({"status": "INACTIVED"}))
    assert car.status == "INACTIVED"
    car = await car_service.update_car(db_session, car.id, CarUpdate.from_payload({"status": "ACTIVED"}))
    assert car.status == "ACTIVED"


@pytest.mark.asyncio
async def test_deactivate_car_with_open_order_is_blocked(db_session):
    car = await insert_car(db_session)
    client = await insert_client(db_session)
    await insert_order(db_session, car, client)

    with pytest.raises(BlockedTransitionError, match="Não é possível desativar o carro. Há pedidos em aberto."):
        await car_service.update_car(db_session, car.id, CarUpdate.from_payload({"status": "INACTIVED"}))

    car_id = car.id
    db_session.expire_all()
    reloaded = await db_session.get(Car, car_id)
    assert reloaded.status == "ACTIVED"


@pytest.mark.asyncio
async def test_update_car_rejects_null_km_before_writing(db_session):
    car = await insert_car(db_session, km=1200)

    with pytest.raises(ValidationError, match="A quilometragem deve ser um número inteiro não negativo."):
        await car_service.update_car(db_session, car.id, CarUpdate.from_payload({"km": None}))
    assert car.km == 1200


@pytest.mark.asyncio
async def test_delete_car_with_open_order_keeps_status(db_session):
    car = await insert_car(db_session)
    client = await insert_client(db_session)
    await insert_order(db_session, car, client)

    with pytest.raises(BlockedTransitionError, match="Não é possível excluir o carro. Há pedidos em aberto."):
        await car_service.delete_car(db_session, car.id)

    car_id = car.id
    db_session.expire_all()
    reloaded = await db_session.get(Car, car_id)
    assert reloaded.status == "ACTIVED"


@pytest.mark.asyncio
async def test_delete_car_after_order_closed(db_session):
    car = await insert_car(db_session)
    client = await insert_client(db_session)
    await insert_order(db_session, car, client, status="CANCELED")

    deleted = await car_service.delete_car(db_session, car.id)

    assert deleted.status == "DELETED"
    with pytest.raises(NotFoundError, match="Este carro já está excluído."):
        await car_service.delete_car(db_session, car.id)


@pytest.mark.asyncio
async def test_list_cars_empty_is_not_found(db_session):
    with pytest.raises(NotFoundError, match="Nenhum carro encontrado."):
        await car_service.list_cars(db_session, CarListQuery())


@pytest.mark.asyncio
async def test_list_cars_default_order_and_page_size(db_session):
    for year in (2015, 2016, 2017):
        await insert_car(db_session, year=year)

    page = await car_service.list_cars(db_session, CarListQuery(page_size=2))

    assert page.total == 3
    assert page.page_size == 2
    assert len(page.cars) == 2


@pytest.mark.asyncio
async def test_list_cars_rejects_page_zero(db_session):
    with pytest.raises(ValidationError):
        await car_service.list_cars(db_session, CarListQuery(page=0))
