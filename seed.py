from werkzeug.security import generate_password_hash

from app import create_app
from models import db, Manager, MenuItem, Table

MENU = [
    dict(name="Chicken Biryani", description="Aromatic basmati rice with tender chicken", price=12.99, category="Desi", spice_level="medium", rating=4.8),
    dict(name="Beef Burger", description="Juicy beef patty with fresh vegetables", price=8.99, category="Fast Food", rating=4.5),
    dict(name="Margherita Pizza", description="Tomato, mozzarella and basil", price=11.99, category="Pizza", rating=4.4),
    dict(name="Caesar Salad", description="Romaine, parmesan and croutons", price=9.50, category="Salad", rating=4.2),
    dict(name="Spaghetti Bolognese", description="Slow-cooked beef ragu", price=12.25, category="Pasta", rating=4.6),
    dict(name="Samosa", description="Crispy pastry filled with spiced potatoes and peas", price=4.99, category="Appetizers", spice_level="mild", rating=4.3),
]


def seed():
    app = create_app()
    with app.app_context():
        if not Manager.query.filter_by(username="admin").first():
            db.session.add(Manager(username="admin", password_hash=generate_password_hash("password"),
                                   full_name="Restaurant Manager", role="manager"))
        if not Manager.query.filter_by(username="kitchen").first():
            db.session.add(Manager(username="kitchen", password_hash=generate_password_hash("kitchen"),
                                   full_name="Kitchen Station 1", role="kitchen"))

        if MenuItem.query.count() == 0:
            db.session.add_all([MenuItem(**item) for item in MENU])

        if Table.query.count() == 0:
            lo, hi = app.config["TABLE_NUMBER_MIN"], app.config["TABLE_NUMBER_MAX"]
            db.session.add_all([Table(table_number=n, capacity=2 if n % 3 else 6) for n in range(lo, hi + 1)])

        db.session.commit()
        print("Seeded. Manager: admin/password, Kitchen: kitchen/kitchen")


if __name__ == "__main__":
    seed()
