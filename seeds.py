from app import create_app
from app.models.store import Store
from app.services.car_service import CarService
from app.services.user_service import UserService


def ensure_customer(store: Store, name: str, email: str, password: str):
    """
    Ensure a customer with `email` exists in the store (idempotent).
    Returns the user id.
    """
    u = store.find_user_by_email(email)
    if u:
        return u["user_id"]
    return UserService.register({"name": name, "email": email, "password": password},
                                store=store)["user_id"]


def main():
    app = create_app()
    with app.app_context():
        store = Store.instance()

        # ---- Demo customer (the default admin is created by create_app) ----
        ensure_customer(store, "Demo Customer", "customer@example.com", "Customer123")

        # ---- Demo cars (create only if none exist) ----
        if not store.cars:
            CarService.create_car({
                "make": "Toyota", "model": "Corolla", "year": 2021, "category": "sedan",
                "price_per_day": 45, "features": ["Air conditioning", "Bluetooth"],
                "images": ["corolla.jpg"],
            }, store=store)
            CarService.create_car({
                "make": "Honda", "model": "Civic", "year": 2022, "category": "sedan",
                "price_per_day": 50, "features": ["Apple CarPlay"], "images": ["civic.jpg"],
            }, store=store)
            CarService.create_car({
                "make": "Mercedes-Benz", "model": "S-Class", "year": 2023, "category": "luxury",
                "description": "Luxury sedan with premium features", "price_per_day": 200,
                "features": ["Leather seats", "Panoramic roof", "Massage seats"],
                "images": ["sclass1.jpg", "sclass2.jpg"],
            }, store=store)
            CarService.create_car({
                "make": "Toyota", "model": "Land Cruiser", "year": 2020, "category": "suv",
                "price_per_day": 120, "features": ["4x4", "7 seats"], "images": ["landcruiser.jpg"],
            }, store=store)

        store.save()

        print("Seed complete.")
        print(f"Admin login:     {app.config['ADMIN_EMAIL']} / {app.config['ADMIN_PASSWORD']}")
        print("Customer login:  customer@example.com / Customer123")


if __name__ == "__main__":
    main()
