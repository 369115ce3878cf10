from unittest.mock import MagicMock

import pytest

from boutique.errors import CustomerStoreError, PaymentGatewayError
from boutique.users.models import Customer
from boutique.users.repository import SupabaseCustomerRepository
from boutique.users.service import ensure_customer

USER = {"id": "u1", "email": "u1@example.com", "name": "Jeanne"}


def test_first_login_creates_stripe_customer_and_saves_record(customers, gateway):
    customer = ensure_customer(USER, repository=customers, gateway=gateway)

    assert customer.payment_id == "cus_test_1"
    assert customers.rows["u1"] == customer
    assert customers.saves == 1
    assert gateway.customers_created == 1


def test_existing_record_is_reused_without_write(customers, gateway):
    customers.rows["u1"] = Customer(id="u1", email="u1@example.com", name="Jeanne", payment_id="cus_old")

    customer = ensure_customer(USER, repository=customers, gateway=gateway)

    assert customer.payment_id == "cus_old"
    assert customers.saves == 0
    assert gateway.customers_created == 0


def test_record_without_payment_id_is_completed(customers, gateway):
    customers.rows["u1"] = Customer(id="u1", email="u1@example.com", name="Jeanne")

    customer = ensure_customer({"id": "u1"}, repository=customers, gateway=gateway)

    assert customer.payment_id == "cus_test_1"
    assert customer.name == "Jeanne"
    assert customers.saves == 1


def test_gateway_failure_saves_nothing(customers, gateway):
    gateway.fail = True
    with pytest.raises(PaymentGatewayError):
        ensure_customer(USER, repository=customers, gateway=gateway)
    assert customers.rows == {}


def test_repository_maps_payment_id_column():
    client = MagicMock()
    chain = client.table.return_value.select.return_value.eq.return_value.limit.return_value
    chain.execute.return_value = MagicMock(data=[{"id": "u1", "email": "e", "name": "n", "paymentId": "cus_9"}])
    repo = SupabaseCustomerRepository(lambda: client)

    assert repo.get_customer("u1").payment_id == "cus_9"

    repo.save_customer(Customer(id="u1", payment_id="cus_9"))
    saved = client.table.return_value.upsert.call_args[0][0]
    assert saved["paymentId"] == "cus_9"


def test_repository_errors_are_raised():
    client = MagicMock()
    client.table.side_effect = Exception("supabase down")
    repo = SupabaseCustomerRepository(lambda: client)
    with pytest.raises(CustomerStoreError):
        repo.get_customer("u1")
    with pytest.raises(CustomerStoreError):
        repo.save_customer(Customer(id="u1"))
