import random
from datetime import date, timedelta
from decimal import Decimal

from app import create_app
from extensions import db
from models import Account, BankCard
from policies import AuthContext
from schemas import BookingCreate, ExcessCreate
from services import bank_cards, bookings, excess_lifecycle, excesses

# ====== CONFIG ======
NUM_CUSTOMERS = 5
BOOKINGS_PER_CUSTOMER = (1, 4)
PASSWORD = "password123"
# =====================

EXCESS_TYPES = ["Scratch", "Dent", "Windscreen", "Tyre", "Interior damage"]


def create_customers():
    print("👤 Creating customer accounts...")

    customers = []
    for i in range(1, NUM_CUSTOMERS + 1):
        email = f"customer{i}@cardoo.com"
        account = Account.query.filter_by(email=email).first()
        if account is None:
            account = Account(name=f"Customer {i}", email=email, role="CUSTOMER")
            account.set_password(PASSWORD)
            db.session.add(account)
        customers.append(account)

    db.session.commit()
    print(f"✅ {len(customers)} customers ready.")
    return customers


def create_bookings(customers):
    print("📦 Creating bookings...")

    created = []
    for customer in customers:
        ctx = AuthContext(account_id=customer.id, role=customer.role)
        for _ in range(random.randint(*BOOKINGS_PER_CUSTOMER)):
            # ended within the last few weeks so excesses can still be filed
            end_date = date.today() - timedelta(days=random.randint(1, 30))
            rental_days = random.randint(2, 14)
            data = BookingCreate(
                contract_id=f"CT-{customer.id}-{random.randint(10000, 99999)}",
                insurance_amount=Decimal(random.choice([500, 1000, 1500])),
                rental_days=rental_days,
                rental_type=random.choice(["daily", "weekly", "monthly"]),
                daily_rate=Decimal(random.randint(40, 150)),
                start_date=end_date - timedelta(days=rental_days),
                end_date=end_date,
            )
            created.append((ctx, bookings.create_booking(ctx, data)))

    print(f"✅ {len(created)} bookings created.")
    return created


def create_excesses(created, admin):
    print("🧾 Creating excess claims...")

    admin_ctx = AuthContext(account_id=admin.id, role=admin.role)
    count = 0
    for ctx, booking in random.sample(created, max(1, len(created) // 2)):
        excess = excesses.create_excess(ctx, ExcessCreate(
            booking_id=booking.id,
            type=random.choice(EXCESS_TYPES),
            amount=Decimal(random.randint(50, 800)),
            description="Reported at vehicle return",
        ))
        count += 1
        outcome = random.choice([None, "APPROVED", "DECLINED"])
        if outcome:
            excess_lifecycle.change_status(admin_ctx, excess.id, outcome, reason="Reviewed")

    print(f"✅ {count} excesses created.")


def create_cards(customers, admin):
    print("💳 Creating bank cards...")

    admin_ctx = AuthContext(account_id=admin.id, role=admin.role)
    for customer in customers:
        card = BankCard(
            account_id=customer.id,
            card_number="4" + "".join(random.choice("0123456789") for _ in range(15)),
            card_holder_name=customer.name.upper(),
            expiry_date=f"{random.randint(1, 12):02d}/{random.randint(27, 32)}",
        )
        db.session.add(card)
        db.session.commit()
        bank_cards.deposit(admin_ctx, card.id, Decimal(random.randint(200, 2000)), "Opening deposit")

    print(f"✅ {len(customers)} cards created.")


if __name__ == "__main__":
    app = create_app()
    with app.app_context():
        db.create_all()
        admin = Account.query.filter_by(role="ADMIN").first()
        if admin is None:
            raise SystemExit("Run create_admin.py first")

        print("🚀 Seeding Cardoo demo data...\n")
        customers = create_customers()
        created = create_bookings(customers)
        create_excesses(created, admin)
        create_cards(customers, admin)
        print("\n🎉 Done.")
