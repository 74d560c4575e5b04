WEBHOOK_URL = "/api/order/checkout/webhook"


def test_webhook_marks_order_paid(client, store, placed_order, sign, make_event):
    payload = make_event("order-1", amount_total=34000)
    r = client.post(WEBHOOK_URL, content=payload, headers={"Stripe-Signature": sign(payload)})
    assert r.status_code == 200
    assert r.json()["status"] == "ok"
    assert store.orders["order-1"]["status"] == "paid"
    assert store.orders["order-1"]["total_amount"] == 340.0


def test_webhook_bad_signature_is_500_and_changes_nothing(client, store, placed_order, make_event):
    payload = make_event("order-1")
    r = client.post(WEBHOOK_URL, content=payload, headers={"Stripe-Signature": "t=1,v1=forged"})
    assert r.status_code == 500
    assert r.json()["detail"].startswith("Webhook error")
    assert store.orders["order-1"]["status"] == "placed"


def test_webhook_missing_signature_is_rejected(client, store, placed_order, make_event):
    r = client.post(WEBHOOK_URL, content=make_event("order-1"))
    assert r.status_code == 500
    assert store.order_writes == 0


def test_webhook_ignores_other_events(client, store, placed_order, sign, make_event):
    payload = make_event("order-1", event_type="charge.refunded")
    r = client.post(WEBHOOK_URL, content=payload, headers={"Stripe-Signature": sign(payload)})
    assert r.status_code == 200
    assert r.json() == {"status": "ignored"}
    assert store.orders["order-1"]["status"] == "placed"


def test_webhook_unknown_order_is_404(client, store, sign, make_event):
    payload = make_event("ghost-order")
    r = client.post(WEBHOOK_URL, content=payload, headers={"Stripe-Signature": sign(payload)})
    assert r.status_code == 404
    assert r.json()["detail"] == "Order not found"


def test_webhook_missing_amount_is_400(client, store, placed_order, sign, make_event):
    payload = make_event("order-1", amount_total=None)
    r = client.post(WEBHOOK_URL, content=payload, headers={"Stripe-Signature": sign(payload)})
    assert r.status_code == 400
    assert r.json()["detail"] == "Amount total is missing in the event data"
    assert store.orders["order-1"]["status"] == "placed"


def test_webhook_redelivery_is_acknowledged(client, store, placed_order, sign, make_event):
    payload = make_event("order-1", amount_total=34000)
    headers = {"Stripe-Signature": sign(payload)}
    assert client.post(WEBHOOK_URL, content=payload, headers=headers).status_code == 200
    writes = store.order_writes

    r = client.post(WEBHOOK_URL, content=payload, headers=headers)
    assert r.status_code == 200
    assert r.json() == {"status": "ok", "applied": False}
    assert store.order_writes == writes


def test_checkout_then_webhook_flow(client, store, fake_stripe_session, sign, make_event):
    r = client.post("/api/order/checkout/create-checkout-session", json={
        "cartItems": [{"menuItemId": "M1", "name": "Paneer Tikka", "quantity": "2"}],
        "deliveryDetails": {"email": "test@example.com", "name": "Asha", "addressLineOne": "1 MG Road", "city": "Pune"},
        "restaurantId": "resto-1",
    })
    assert r.status_code == 200
    order_id = fake_stripe_session["create"][0]["metadata"]["orderId"]

    # 2 x 150.00 + livraison 40.00
    payload = make_event(order_id, amount_total=34000)
    r = client.post(WEBHOOK_URL, content=payload, headers={"Stripe-Signature": sign(payload)})
    assert r.status_code == 200

    orders = client.get("/api/order").json()
    assert len(orders) == 1
    assert orders[0]["status"] == "paid"
    assert orders[0]["totalAmount"] == 340
    assert orders[0]["restaurant"]["restaurantName"] == "Spice Route"


def test_webhook_unknown_stored_status_is_500(client, store, placed_order, sign, make_event):
    store.orders["order-1"]["status"] = "refunded"
    payload = make_event("order-1", amount_total=34000)
    r = client.post(WEBHOOK_URL, content=payload, headers={"Stripe-Signature": sign(payload)})
    assert r.status_code == 500
    assert r.json()["detail"] == "Order has an unknown status"
    assert store.order_writes == 0
