from invoicing import create_app, db
from invoicing.models import Customer, Invoice

DEMO_CUSTOMERS = [
    ("Delba de Oliveira", "delba@oliveira.com"),
    ("Lee Robinson", "lee@robinson.com"),
    ("Hector Simpson", "hector@simpson.com"),
]

DEMO_INVOICES = [
    # (customer index, cents, status)
    (0, 15795, "pending"),
    (1, 20348, "pending"),
    (2, 3040, "paid"),
    (0, 44800, "paid"),
]


def seed_initial_data() -> None:
    """Seed the database with demo customers and invoices."""
    app = create_app(["--demo"])
    with app.app_context():
        if Customer.query.count():
            print("Database already seeded.")
            return

        customers = [Customer(name=name, email=email) for name, email in DEMO_CUSTOMERS]
        db.session.add_all(customers)
        db.session.flush()
        db.session.add_all(
            Invoice(customer_id=customers[index].id, amount=cents, status=status)
            for index, cents, status in DEMO_INVOICES
        )
        db.session.commit()
        print(
            f"Created {len(DEMO_CUSTOMERS)} customers and {len(DEMO_INVOICES)} invoices."
        )


if __name__ == "__main__":
    seed_initial_data()
