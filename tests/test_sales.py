"""
Sale workflow tests: stock deduction, reconciliation on update, delete
restock policy, reference handling and tenant scoping.
"""

from decimal import Decimal

import pytest

from app.config.settings import settings

SALES_URL = '/api/v1/sales'


def create_sale(client, headers, items, payment_method="Cash", **extra):
    payload = {'items': items, 'payment_method': payment_method}
    payload.update(extra)
    return client.post(SALES_URL, headers=headers, json=payload)


class TestCreateSale:
    """POST /sales"""

    def test_deducts_requested_quantity(self, client, headers_a, make_product, quantity_of):
        product = make_product(headers_a, quantity=10, price="2.50")

        response = create_sale(client, headers_a, [{'product_id': product['id'], 'quantity': 4}])

        assert response.status_code == 201, response.text
        sale = response.json()['sale']
        assert sale['items'][0]['quantity'] == 4
        assert Decimal(sale['total_price']) == Decimal("10.00")
        assert quantity_of(headers_a, product['id']) == 6

    def test_supplied_total_is_kept(self, client, headers_a, make_product):
        product = make_product(headers_a, quantity=10, price="2.50")

        response = create_sale(
            client, headers_a, [{'product_id': product['id'], 'quantity': 4}], total_price="9.00"
        )

        assert response.status_code == 201
        assert Decimal(response.json()['sale']['total_price']) == Decimal("9.00")

    def test_multiple_items_each_deducted(self, client, headers_a, make_product, quantity_of):
        p1 = make_product(headers_a, quantity=10, price="1.00")
        p2 = make_product(headers_a, quantity=5, price="3.00")

        response = create_sale(client, headers_a, [
            {'product_id': p1['id'], 'quantity': 3},
            {'product_id': p2['id'], 'quantity': 5},
        ])

        assert response.status_code == 201
        assert Decimal(response.json()['sale']['total_price']) == Decimal("18.00")
        assert quantity_of(headers_a, p1['id']) == 7
        assert quantity_of(headers_a, p2['id']) == 0

    def test_insufficient_stock_rejected_and_unchanged(self, client, headers_a, make_product, quantity_of):
        product = make_product(headers_a, quantity=2)

        response = create_sale(client, headers_a, [{'product_id': product['id'], 'quantity': 5}])

        assert response.status_code == 400
        body = response.json()
        assert body['success'] is False
        assert body['error_code'] == "INSUFFICIENT_STOCK"
        assert body['message'] == f"Insufficient stock for product: {product['name']}"
        assert body['details']['available'] == 2
        assert quantity_of(headers_a, product['id']) == 2

    def test_failing_later_item_reverts_earlier_items(self, client, headers_a, make_product, quantity_of):
        p1 = make_product(headers_a, quantity=10)
        p2 = make_product(headers_a, quantity=1)

        response = create_sale(client, headers_a, [
            {'product_id': p1['id'], 'quantity': 4},
            {'product_id': p2['id'], 'quantity': 2},
        ])

        assert response.status_code == 400
        assert quantity_of(headers_a, p1['id']) == 10
        assert quantity_of(headers_a, p2['id']) == 1
        assert client.get(SALES_URL, headers=headers_a).json()['count'] == 0

    def test_unknown_product_is_not_found(self, client, headers_a):
        response = create_sale(client, headers_a, [{'product_id': 9999, 'quantity': 1}])

        assert response.status_code == 404
        assert response.json()['message'] == "Product not found: 9999"

    def test_unknown_customer_is_not_found(self, client, headers_a, make_product, quantity_of):
        product = make_product(headers_a, quantity=10)

        response = create_sale(
            client, headers_a, [{'product_id': product['id'], 'quantity': 1}], customer_id=9999
        )

        assert response.status_code == 404
        assert quantity_of(headers_a, product['id']) == 10

    @pytest.mark.parametrize("items", [
        [],
        [{'product_id': 1, 'quantity': 0}],
        [{'product_id': 1, 'quantity': -2}],
        [{'product_id': "abc", 'quantity': 1}],
        [{'product_id': 1.5, 'quantity': 1}],
        [{'product_id': {'id': 2.7}, 'quantity': 1}],
    ])
    def test_invalid_items_are_validation_errors(self, client, headers_a, items):
        response = create_sale(client, headers_a, items)

        assert response.status_code == 400
        assert response.json()['error_code'] == "VALIDATION_ERROR"

    def test_fractional_product_id_deducts_nothing(self, client, headers_a, make_product, quantity_of):
        product = make_product(headers_a, quantity=10)

        response = create_sale(client, headers_a, [{'product_id': product['id'] + 0.7, 'quantity': 1}])

        assert response.status_code == 400
        assert response.json()['error_code'] == "VALIDATION_ERROR"
        assert quantity_of(headers_a, product['id']) == 10

    def test_invalid_payment_method(self, client, headers_a, make_product):
        product = make_product(headers_a)

        response = create_sale(
            client, headers_a, [{'product_id': product['id'], 'quantity': 1}], payment_method="Barter"
        )

        assert response.status_code == 400

    def test_expanded_product_reference_accepted(self, client, headers_a, make_product, quantity_of):
        product = make_product(headers_a, quantity=10)

        response = create_sale(client, headers_a, [{'product_id': product, 'quantity': 2}])

        assert response.status_code == 201
        assert response.json()['sale']['items'][0]['product_id'] == product['id']
        assert quantity_of(headers_a, product['id']) == 8

    def test_customer_is_resolved(self, client, headers_a, make_product, make_customer):
        product = make_product(headers_a)
        customer = make_customer(headers_a)

        response = create_sale(
            client, headers_a, [{'product_id': product['id'], 'quantity': 1}],
            customer_id=customer['id'], payment_method="UPI"
        )

        sale = response.json()['sale']
        assert sale['customer_id'] == customer['id']
        assert sale['customer']['name'] == customer['name']
        assert sale['payment_method'] == "UPI"

    def test_requires_authentication(self, client):
        response = create_sale(client, {}, [{'product_id': 1, 'quantity': 1}])

        assert response.status_code == 401
        assert response.headers['WWW-Authenticate'] == "Bearer"


class TestReadSale:
    """GET /sales and GET /sales/{id}"""

    def test_round_trip_keeps_item_order(self, client, headers_a, make_product):
        products = [make_product(headers_a, quantity=20) for _ in range(3)]
        items = [
            {'product_id': products[2]['id'], 'quantity': 5},
            {'product_id': products[0]['id'], 'quantity': 1},
            {'product_id': products[1]['id'], 'quantity': 3},
        ]
        sale_id = create_sale(client, headers_a, items).json()['sale']['id']

        response = client.get(f'{SALES_URL}/{sale_id}', headers=headers_a)

        assert response.status_code == 200
        fetched = response.json()['sale']['items']
        assert [(i['product_id'], i['quantity']) for i in fetched] == [
            (i['product_id'], i['quantity']) for i in items
        ]
        assert [i['product']['name'] for i in fetched] == [
            products[2]['name'], products[0]['name'], products[1]['name']
        ]

    def test_list_resolves_products(self, client, headers_a, make_product):
        product = make_product(headers_a)
        create_sale(client, headers_a, [{'product_id': product['id'], 'quantity': 1}])

        response = client.get(SALES_URL, headers=headers_a)

        body = response.json()
        assert body['count'] == 1
        assert body['sales'][0]['items'][0]['product']['id'] == product['id']

    def test_deleted_product_resolves_to_null(self, client, headers_a, make_product):
        product = make_product(headers_a)
        sale_id = create_sale(
            client, headers_a, [{'product_id': product['id'], 'quantity': 1}]
        ).json()['sale']['id']

        client.delete(f"/api/v1/products/{product['id']}", headers=headers_a)
        response = client.get(f'{SALES_URL}/{sale_id}', headers=headers_a)

        assert response.status_code == 200
        assert response.json()['sale']['items'][0]['product'] is None

    def test_missing_sale(self, client, headers_a):
        response = client.get(f'{SALES_URL}/12345', headers=headers_a)

        assert response.status_code == 404
        assert response.json()['message'] == "Sale not found."


class TestUpdateSale:
    """PUT /sales/{id}"""

    def test_restore_then_apply(self, client, headers_a, make_product, quantity_of):
        product = make_product(headers_a, quantity=10, price="5.00")
        sale = create_sale(client, headers_a, [{'product_id': product['id'], 'quantity': 4}]).json()['sale']
        assert quantity_of(headers_a, product['id']) == 6

        response = client.put(f"{SALES_URL}/{sale['id']}", headers=headers_a, json={
            'items': [{'product_id': product['id'], 'quantity': 7}],
            'payment_method': "Credit Card",
            'total_price': "35.00"
        })

        assert response.status_code == 200, response.text
        assert quantity_of(headers_a, product['id']) == 3

    def test_read_after_update_returns_new_values(self, client, headers_a, make_product):
        p1 = make_product(headers_a, quantity=10)
        p2 = make_product(headers_a, quantity=10)
        sale = create_sale(client, headers_a, [{'product_id': p1['id'], 'quantity': 2}]).json()['sale']

        client.put(f"{SALES_URL}/{sale['id']}", headers=headers_a, json={
            'items': [
                {'product_id': p2['id'], 'quantity': 3},
                {'product_id': p1['id'], 'quantity': 1},
            ],
            'payment_method': "Bank Transfer",
            'total_price': "12.34"
        })
        fetched = client.get(f"{SALES_URL}/{sale['id']}", headers=headers_a).json()['sale']

        assert [(i['product_id'], i['quantity']) for i in fetched['items']] == [(p2['id'], 3), (p1['id'], 1)]
        assert fetched['payment_method'] == "Bank Transfer"
        assert Decimal(fetched['total_price']) == Decimal("12.34")

    def test_failed_update_changes_nothing(self, client, headers_a, make_product, quantity_of):
        p1 = make_product(headers_a, quantity=10)
        p2 = make_product(headers_a, quantity=1)
        sale = create_sale(client, headers_a, [{'product_id': p1['id'], 'quantity': 4}]).json()['sale']

        response = client.put(f"{SALES_URL}/{sale['id']}", headers=headers_a, json={
            'items': [
                {'product_id': p1['id'], 'quantity': 2},
                {'product_id': p2['id'], 'quantity': 5},
            ]
        })

        assert response.status_code == 400
        assert response.json()['error_code'] == "INSUFFICIENT_STOCK"
        assert quantity_of(headers_a, p1['id']) == 6
        assert quantity_of(headers_a, p2['id']) == 1
        fetched = client.get(f"{SALES_URL}/{sale['id']}", headers=headers_a).json()['sale']
        assert [(i['product_id'], i['quantity']) for i in fetched['items']] == [(p1['id'], 4)]

    def test_update_can_use_restored_stock(self, client, headers_a, make_product, quantity_of):
        product = make_product(headers_a, quantity=5)
        sale = create_sale(client, headers_a, [{'product_id': product['id'], 'quantity': 5}]).json()['sale']

        response = client.put(f"{SALES_URL}/{sale['id']}", headers=headers_a, json={
            'items': [{'product_id': product['id'], 'quantity': 5}]
        })

        assert response.status_code == 200
        assert quantity_of(headers_a, product['id']) == 0

    def test_unknown_product_rolls_back_restore(self, client, headers_a, make_product, quantity_of):
        product = make_product(headers_a, quantity=10)
        sale = create_sale(client, headers_a, [{'product_id': product['id'], 'quantity': 4}]).json()['sale']

        response = client.put(f"{SALES_URL}/{sale['id']}", headers=headers_a, json={
            'items': [{'product_id': 9999, 'quantity': 1}]
        })

        assert response.status_code == 404
        assert quantity_of(headers_a, product['id']) == 6
        fetched = client.get(f"{SALES_URL}/{sale['id']}", headers=headers_a).json()['sale']
        assert [(i['product_id'], i['quantity']) for i in fetched['items']] == [(product['id'], 4)]

    def test_foreign_product_rolls_back_restore(self, client, headers_a, headers_b, make_product, quantity_of):
        product_a = make_product(headers_a, quantity=10)
        product_b = make_product(headers_b, quantity=10)
        sale = create_sale(client, headers_a, [{'product_id': product_a['id'], 'quantity': 4}]).json()['sale']

        response = client.put(f"{SALES_URL}/{sale['id']}", headers=headers_a, json={
            'items': [{'product_id': product_b['id'], 'quantity': 1}]
        })

        assert response.status_code == 404
        assert quantity_of(headers_a, product_a['id']) == 6
        assert quantity_of(headers_b, product_b['id']) == 10

    def test_empty_items_rejected(self, client, headers_a, make_product, quantity_of):
        product = make_product(headers_a, quantity=10)
        sale = create_sale(client, headers_a, [{'product_id': product['id'], 'quantity': 4}]).json()['sale']

        response = client.put(f"{SALES_URL}/{sale['id']}", headers=headers_a, json={'items': []})

        assert response.status_code == 400
        assert response.json()['error_code'] == "VALIDATION_ERROR"
        assert quantity_of(headers_a, product['id']) == 6

    def test_missing_sale(self, client, headers_a, make_product):
        product = make_product(headers_a)

        response = client.put(f'{SALES_URL}/4242', headers=headers_a, json={
            'items': [{'product_id': product['id'], 'quantity': 1}]
        })

        assert response.status_code == 404


class TestDeleteSale:
    """DELETE /sales/{id}"""

    def _sale(self, client, headers, product, quantity=4):
        return create_sale(client, headers, [{'product_id': product['id'], 'quantity': quantity}]).json()['sale']

    def test_default_keeps_stock_written_off(self, client, headers_a, make_product, quantity_of, monkeypatch):
        monkeypatch.setattr(settings, "restore_stock_on_sale_delete", False)
        product = make_product(headers_a, quantity=10)
        sale = self._sale(client, headers_a, product)

        response = client.delete(f"{SALES_URL}/{sale['id']}", headers=headers_a)

        assert response.status_code == 200
        assert response.json()['stock_restored'] is False
        assert quantity_of(headers_a, product['id']) == 6
        assert client.get(f"{SALES_URL}/{sale['id']}", headers=headers_a).status_code == 404

    def test_setting_restores_stock(self, client, headers_a, make_product, quantity_of, monkeypatch):
        monkeypatch.setattr(settings, "restore_stock_on_sale_delete", True)
        product = make_product(headers_a, quantity=10)
        sale = self._sale(client, headers_a, product)

        response = client.delete(f"{SALES_URL}/{sale['id']}", headers=headers_a)

        assert response.json()['stock_restored'] is True
        assert quantity_of(headers_a, product['id']) == 10

    def test_query_parameter_overrides_setting(self, client, headers_a, make_product, quantity_of, monkeypatch):
        monkeypatch.setattr(settings, "restore_stock_on_sale_delete", False)
        product = make_product(headers_a, quantity=10)
        sale = self._sale(client, headers_a, product)

        response = client.delete(f"{SALES_URL}/{sale['id']}?restock=true", headers=headers_a)

        assert response.json()['stock_restored'] is True
        assert quantity_of(headers_a, product['id']) == 10

    def test_missing_sale(self, client, headers_a):
        assert client.delete(f'{SALES_URL}/777', headers=headers_a).status_code == 404


class TestSaleTenantIsolation:
    """Sales and products of one owner are invisible to another."""

    def test_cannot_sell_foreign_product(self, client, headers_a, headers_b, make_product, quantity_of):
        product_a = make_product(headers_a, quantity=10)

        response = create_sale(client, headers_b, [{'product_id': product_a['id'], 'quantity': 1}])

        assert response.status_code == 404
        assert quantity_of(headers_a, product_a['id']) == 10

    def test_cannot_read_update_or_delete_foreign_sale(self, client, headers_a, headers_b, make_product):
        product_a = make_product(headers_a, quantity=10)
        product_b = make_product(headers_b, quantity=10)
        sale = create_sale(client, headers_a, [{'product_id': product_a['id'], 'quantity': 1}]).json()['sale']

        assert client.get(f"{SALES_URL}/{sale['id']}", headers=headers_b).status_code == 404
        assert client.put(f"{SALES_URL}/{sale['id']}", headers=headers_b, json={
            'items': [{'product_id': product_b['id'], 'quantity': 1}]
        }).status_code == 404
        assert client.delete(f"{SALES_URL}/{sale['id']}", headers=headers_b).status_code == 404
        assert client.get(SALES_URL, headers=headers_b).json()['count'] == 0
        assert client.get(f"{SALES_URL}/{sale['id']}", headers=headers_a).status_code == 200
