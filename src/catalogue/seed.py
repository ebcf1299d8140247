"""Starter catalogue used by ``manage.py replace-products`` when no file is given."""

SEED_PRODUCTS = [
    {
        "name": "SS Platinum English Willow Bat",
        "subtitle": "Elite Players Edition",
        "description": (
            "Elite grade 1+ English Willow, used by top internationals. Perfectly balanced for explosive power."
        ),
        "manufacturer": "SS Cricket, India",
        "price": 45000,
        "mrp": 52000,
        "category": "Cricket Bats",
        "images": ["https://ik.imagekit.io/vmzc9m9fg/ss_platinum.jpg"],
        "stock": 5,
        "rating": 4.8,
        "reviews_count": 12,
        "highlights": ["Hand-crafted in India", "Ultra-premium finish", "Grade 1+ Willow"],
        "specs": {"Weight": "1160g", "Grains": "9-11", "Handle": "Round"},
    },
    {
        "name": "SG Test White Cricket Ball",
        "subtitle": "The Standard of Test Cricket",
        "description": (
            "Official test match ball, superior seam shape and retention. Ideal for longevity and swing."
        ),
        "manufacturer": "SG Cricket, India",
        "price": 1800,
        "mrp": 2200,
        "category": "Cricket Balls",
        "images": ["https://ik.imagekit.io/vmzc9m9fg/sg_test_white.jpg"],
        "stock": 24,
        "rating": 4.5,
        "reviews_count": 45,
        "highlights": ["Hand-stitched", "MCC Approved", "4-Piece Construction"],
        "specs": {"Material": "Alum tanned leather", "Color": "White"},
    },
    {
        "name": "Adidas 22YDS Spike Shoes",
        "subtitle": "Speed on the Pitch",
        "description": (
            "High-performance spikes for maximum traction and speed. Lightweight design for all-day comfort."
        ),
        "manufacturer": "Adidas India",
        "price": 8500,
        "mrp": 9999,
        "category": "Shoes",
        "images": ["https://ik.imagekit.io/vmzc9m9fg/adidas_spikes.jpg"],
        "stock": 10,
        "rating": 4.2,
        "reviews_count": 18,
        "highlights": ["Adiwear outsole", "Breathable mesh", "TPU cage for stability"],
        "specs": {"Sole": "TPU with spikes", "Color": "White/Blue"},
    },
]
