"""
Carga inicial del árbol de categorías Tesla (Model 3)

Uso: python -m scripts.seed_data
Es idempotente: las categorías existentes se omiten.
"""
import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.core.database import create_database, session_scope
from app.core.exceptions import CatalogError
from app.services.category_service import category_service

MODEL_3_HIERARCHY = {
    "name": "Model 3",
    "description": "Tesla Model 3 parts and accessories",
    "children": [
        {
            "name": "Model 3 - BODY",
            "description": "Body panels, bumpers and glass",
            "children": [
                {"name": "M3 1001 - Bumper and Fascia", "description": "Front and rear bumpers, fascia components"},
                {"name": "M3 1010 - Body Panels", "description": "Door panels, quarter panels, body structural components"},
                {"name": "M3 1020 - Windshield and Body Glass", "description": "Glass components including windshield and windows"},
            ],
        },
        {
            "name": "Model 3 - BRAKES",
            "description": "Brake system components",
            "children": [
                {"name": "M3 3301 - Brake Discs and Calipers", "description": "Brake system components and assemblies"},
                {"name": "M3 3303 - Brake Pipes and Hoses", "description": "Brake system components and assemblies"},
                {"name": "M3 3325 - Brake Pedal", "description": "Brake pedal assemblies and components"},
            ],
        },
        {
            "name": "Model 3 - CLOSURE COMPONENTS",
            "description": "Doors, trunk and closure hardware",
            "children": [
                {"name": "M3 1120 - Trunk", "description": "Trunk lid, latch, and related components"},
                {"name": "M3 1145 - Exterior Door Handles", "description": "Exterior door handle assemblies and components"},
                {"name": "M3 1150 - Door Glass Regulators", "description": "Window regulators and glass mechanisms"},
            ],
        },
        {
            "name": "Model 3 - ELECTRICAL",
            "description": "Low voltage electrical systems",
            "children": [
                {"name": "M3 1701 - 12V Battery and Fuses", "description": "12V electrical system components"},
                {"name": "M3 1710 - Harnesses", "description": "Electrical wiring harnesses"},
                {"name": "M3 1740 - Exterior Lights", "description": "Headlights, taillights, and exterior lighting"},
                {"name": "M3 1750 - Wipers and Washers", "description": "Windshield wiper and washer systems"},
            ],
        },
        {
            "name": "Model 3 - EXTERIOR FITTINGS",
            "description": "Trim, mirrors and underbody",
            "children": [
                {"name": "M3 1201 - Wheel Arch Liners", "description": "Wheel well liners and protective components"},
                {"name": "M3 1209 - Exterior Mirrors", "description": "Side mirrors and mirror components"},
                {"name": "M3 1220 - Exterior Trim", "description": "Exterior trim pieces and moldings"},
            ],
        },
    ],
}


def run():
    create_database()
    try:
        with session_scope() as db:
            print("  Creando árbol de categorías...")
            result = category_service.setup_hierarchy(db, MODEL_3_HIERARCHY)
    except CatalogError as e:
        print(f"❌ Error insertando datos: {e.message}")
        return 1

    print(f"  ✓ Categorías creadas: {result['created']}")
    print(f"  ⚠ Categorías existentes omitidas: {result['skipped']}")
    for error in result["errors"]:
        print(f"  ❌ {error}")

    print("\n✅ Datos insertados correctamente")
    return 0


if __name__ == "__main__":
    sys.exit(run())
