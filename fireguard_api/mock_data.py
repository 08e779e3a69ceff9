# Static catalog served when Google Sheets is not configured or unreachable.
# Process-local and read-only: nothing here is ever written back.
from .models import Product

MOCK_PRODUCTS = (
    Product(
        product_id="PROD-001",
        product_name="ABC Dry Powder Fire Extinguisher (6kg)",
        category="Extinguishers",
        type="ABC Powder",
        capacity="6kg",
        short_description="Versatile fire extinguisher suitable for Class A, B, and C fires.",
        long_description="Premium quality ABC dry powder fire extinguisher with ISI certification. "
                         "Suitable for offices, homes, vehicles, and industrial settings. "
                         "Features a durable metal body with anti-corrosion coating.",
        image_url="https://images.unsplash.com/photo-1582132249535-46d467491d92?auto=format&fit=crop&q=80&w=600",
        price=4500,
        status="active",
        created_at="2024-01-15",
    ),
    Product(
        product_id="PROD-002",
        product_name="CO2 Fire Extinguisher (4.5kg)",
        category="Extinguishers",
        type="CO2",
        capacity="4.5kg",
        short_description="Ideal for electrical fires and server rooms.",
        long_description="Carbon dioxide fire extinguisher designed for electrical equipment and "
                         "flammable liquid fires. Leaves no residue, making it perfect for data "
                         "centers and laboratories.",
        image_url="https://images.unsplash.com/photo-1558618666-fcd25c85cd64?auto=format&fit=crop&q=80&w=600",
        price=6800,
        status="active",
        created_at="2024-01-15",
    ),
    Product(
        product_id="PROD-003",
        product_name="Smart Smoke Detector Pro",
        category="Alarms",
        type="Photoelectric",
        capacity="N/A",
        short_description="WiFi-enabled smoke detector with mobile alerts.",
        long_description="Advanced photoelectric smoke detector with WiFi connectivity. Sends instant "
                         "alerts to your smartphone. Features 10-year battery life and easy ceiling "
                         "mount installation.",
        image_url="https://images.unsplash.com/photo-1635322966219-b75ed372eb01?auto=format&fit=crop&q=80&w=600",
        price=2800,
        status="active",
        created_at="2024-01-16",
    ),
    Product(
        product_id="PROD-004",
        product_name="Fire Hydrant Landing Valve",
        category="Hydrants",
        type="Landing Valve",
        capacity="63mm",
        short_description="ISI marked hydrant valve for building installations.",
        long_description="High-quality gunmetal landing valve conforming to IS:5290. Suitable for wet "
                         "and dry riser systems. Includes coupling and blank cap.",
        image_url="https://images.unsplash.com/photo-1545259742-b839d208bb24?auto=format&fit=crop&q=80&w=600",
        price=3200,
        status="active",
        created_at="2024-01-17",
    ),
    Product(
        product_id="PROD-005",
        product_name="Fire Safety Signage Pack",
        category="Signage",
        type="Glow Sign",
        capacity="Set of 10",
        short_description="Photoluminescent safety signs for emergency exits.",
        long_description="Complete set of 10 photoluminescent fire safety signs including exit signs, "
                         "fire extinguisher location markers, and evacuation route indicators. "
                         "Complies with NBC 2016 requirements.",
        image_url="https://images.unsplash.com/photo-1558449028-b53a39d100fc?auto=format&fit=crop&q=80&w=600",
        price=1200,
        status="active",
        created_at="2024-01-18",
    ),
    Product(
        product_id="PROD-006",
        product_name="Fire Blanket (1.2m x 1.2m)",
        category="Accessories",
        type="Fibreglass",
        capacity="1.2m x 1.2m",
        short_description="Quick-release fire blanket for kitchens.",
        long_description="Discontinued fibreglass fire blanket in a wall-mounted pouch.",
        image_url="",
        price=900,
        status="disabled",
        created_at="2024-01-19",
    ),
)

# Seed account for the in-process user directory (password: "password")
MOCK_USER = {
    "id": "USR-001",
    "name": "Test User",
    "email": "test@example.com",
    "password": "password",
}
