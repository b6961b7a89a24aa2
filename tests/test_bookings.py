"""Tests for booking creation, access and cascading deletion."""

from datetime import date, timedelta
from decimal import Decimal

from extensions import db
from models.booking import Booking
from models.excess import Excess
from models.excess_action import ExcessAction
from models.finance import Finance
from models.notification import Notification
from services import excess_lifecycle


def booking_body(**overrides):
    end = date.today() - timedelta(days=2)
    body = {
        "contract_id": "CT-100",
        "insurance_amount": "1000.00",
        "rental_days": 3,
        "rental_type": "daily",
        "daily_rate": "100.00",
        "start_date": (end - timedelta(days=3)).isoformat(),
        "end_date": end.isoformat(),
    }
    body.update(overrides)
    return body


class TestCreateBooking:
    def test_create_debits_daily_rate(self, app, make_account, login):
        customer = make_account()
        response = login(customer).post("/bookings", json=booking_body())
        assert response.status_code == 201
        booking = response.get_json()
        assert booking["status"] == "PENDING"
        assert booking["account_id"] == customer.id

        with app.app_context():
            debit = Finance.query.filter_by(booking_id=booking["id"]).one()
            assert debit.type == "DEBIT"
            # the daily rate alone, not rate x days
            assert debit.amount == Decimal("100.00")
            assert debit.reference == f"BOOKING-{booking['id']}"

    def test_staff_are_notified(self, app, make_account, login):
        admin = make_account("ADMIN")
        employee = make_account("EMPLOYEE")
        make_account("EMPLOYEE", active=False)
        customer = make_account()
        login(customer).post("/bookings", json=booking_body())
        with app.app_context():
            recipients = {n.account_id for n in Notification.query.filter_by(type="BOOKING_CREATED")}
        assert recipients == {admin.id, employee.id}

    def test_end_before_start_is_rejected(self, make_account, login):
        client = login(make_account())
        response = client.post("/bookings", json=booking_body(
            start_date=date.today().isoformat(), end_date=date.today().isoformat()))
        assert response.status_code == 400

    def test_duplicate_contract_id_conflicts(self, make_account, login):
        client = login(make_account())
        assert client.post("/bookings", json=booking_body()).status_code == 201
        response = client.post("/bookings", json=booking_body())
        assert response.status_code == 409

    def test_unknown_rental_type(self, make_account, login):
        client = login(make_account())
        response = client.post("/bookings", json=booking_body(rental_type="hourly"))
        assert response.status_code == 400


class TestBookingAccess:
    def test_list_only_own_bookings(self, make_account, make_booking, login):
        first, second = make_account(), make_account()
        own = make_booking(first)
        make_booking(second)
        bookings = login(first).get("/bookings").get_json()
        assert [b["id"] for b in bookings] == [own]

    def test_staff_may_list_other_account(self, make_account, make_booking, login):
        employee, customer = make_account("EMPLOYEE"), make_account()
        booking_id = make_booking(customer)
        bookings = login(employee).get(f"/bookings?userId={customer.id}").get_json()
        assert [b["id"] for b in bookings] == [booking_id]

    def test_other_customer_cannot_view(self, make_account, make_booking, login):
        owner, stranger = make_account(), make_account()
        booking_id = make_booking(owner)
        assert login(stranger).get(f"/bookings/{booking_id}").status_code == 403

    def test_admin_can_view_with_excesses(self, make_account, make_booking, make_excess, login):
        admin, owner = make_account("ADMIN"), make_account()
        booking_id = make_booking(owner)
        make_excess(owner, booking_id)
        body = login(admin).get(f"/bookings/{booking_id}").get_json()
        assert body["customer"]["id"] == owner.id
        assert len(body["excesses"]) == 1
        assert body["finances"][0]["type"] == "DEBIT"

    def test_patch_status(self, make_account, make_booking, login):
        owner = make_account()
        booking_id = make_booking(owner)
        response = login(owner).patch(f"/bookings/{booking_id}", json={"status": "CONFIRMED"})
        assert response.status_code == 200
        assert response.get_json()["status"] == "CONFIRMED"

    def test_excesses_count(self, make_account, make_booking, make_excess, login):
        owner = make_account()
        booking_id = make_booking(owner)
        make_excess(owner, booking_id)
        make_excess(owner, booking_id, amount="40.00")
        assert login(owner).get(f"/bookings/{booking_id}/excesses-count").get_json() == {"count": 2}


class TestDeleteBooking:
    def test_cascade_leaves_no_orphans(self, app, make_account, make_booking, make_excess, login):
        admin, owner = make_account("ADMIN"), make_account()
        booking_id = make_booking(owner)
        excess_id = make_excess(owner, booking_id)
        with app.app_context():
            excess_lifecycle.change_status(admin.ctx, excess_id, "APPROVED")

        response = login(owner).delete(f"/bookings/{booking_id}")
        assert response.status_code == 200
        removed = response.get_json()["removed"]
        assert removed["excesses"] == 1
        assert removed["finances"] == 2

        with app.app_context():
            assert db.session.get(Booking, booking_id) is None
            assert Excess.query.count() == 0
            assert ExcessAction.query.count() == 0
            assert Finance.query.count() == 0
            assert Notification.query.filter(
                (Notification.booking_id == booking_id) | (Notification.excess_id == excess_id)).count() == 0

    def test_other_customer_cannot_delete(self, app, make_account, make_booking, login):
        owner, stranger = make_account(), make_account()
        booking_id = make_booking(owner)
        assert login(stranger).delete(f"/bookings/{booking_id}").status_code == 403
        with app.app_context():
            assert db.session.get(Booking, booking_id) is not None


class TestUpdateBooking:
    def test_end_date_before_start_is_rejected(self, app, make_account, make_booking, login):
        owner = make_account()
        booking_id = make_booking(owner)
        response = login(owner).patch(f"/bookings/{booking_id}", json={"end_date": "2000-01-01"})
        assert response.status_code == 400
        assert response.get_json()["error"] == "end_date must be after start_date"
        with app.app_context():
            assert db.session.get(Booking, booking_id).end_date != date(2000, 1, 1)

    def test_start_date_past_end_is_rejected(self, make_account, make_booking, login):
        owner = make_account()
        booking_id = make_booking(owner)
        start = (date.today() + timedelta(days=30)).isoformat()
        assert login(owner).patch(f"/bookings/{booking_id}", json={"start_date": start}).status_code == 400

    def test_moving_both_dates_together(self, make_account, make_booking, login):
        owner = make_account()
        booking_id = make_booking(owner)
        response = login(owner).patch(f"/bookings/{booking_id}", json={
            "start_date": "2030-01-01", "end_date": "2030-01-05"})
        assert response.status_code == 200
        assert response.get_json()["end_date"] == "2030-01-05"

    def test_null_for_required_column_is_400(self, app, make_account, make_booking, login):
        owner = make_account()
        booking_id = make_booking(owner)
        response = login(owner).patch(f"/bookings/{booking_id}", json={"status": None})
        assert response.status_code == 400
        assert [tuple(item["loc"]) for item in response.get_json()["details"]] == [("status",)]
        with app.app_context():
            assert db.session.get(Booking, booking_id).status == "PENDING"

    def test_booking_reference_may_be_cleared(self, make_account, make_booking, login):
        owner = make_account()
        booking_id = make_booking(owner)
        response = login(owner).patch(f"/bookings/{booking_id}", json={"booking_reference": None})
        assert response.status_code == 200
        assert response.get_json()["booking_reference"] is None
