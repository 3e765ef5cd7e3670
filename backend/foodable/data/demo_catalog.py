# Демо-каталог: рестораны и предложения для пустой БД (SEED_DEMO_DATA=true).
# Цены в центах; у пекарни qty=0, чтобы в каталоге было распроданное предложение.

DEMO_RESTAURANTS = [
    {
        "key": "tokyo",
        "name": "Tokyo Bites",
        "area": "Woolloongabba",
        "hero_url": "https://images.unsplash.com/photo-1546069901-ba9599a7e63c?q=80&w=1600&auto=format&fit=crop",
    },
    {
        "key": "crust",
        "name": "Crust & Crumb",
        "area": "West End",
        "hero_url": "https://images.unsplash.com/photo-1541592106381-b31e9677c0e5?q=80&w=1600&auto=format&fit=crop",
    },
    {
        "key": "nonna",
        "name": "Nonna's",
        "area": "Fortitude Valley",
        "hero_url": "https://images.unsplash.com/photo-1525755662778-989d0524087e?q=80&w=1600&auto=format&fit=crop",
    },
]

DEMO_OFFERS = [
    {
        "restaurant": "tokyo",
        "title": "Sushi Rescue Box",
        "category": "mystery",
        "price_cents": 800,
        "original_price_cents": 2200,
        "distance_km": 1.2,
        "pickup_start": "17:30",
        "pickup_end": "19:00",
        "quantity": 3,
    },
    {
        "restaurant": "crust",
        "title": "Bakery Mixed Bag",
        "category": "donation",
        "price_cents": 500,
        "original_price_cents": 1600,
        "distance_km": 0.7,
        "pickup_start": "16:00",
        "pickup_end": "18:00",
        "quantity": 0,
    },
    {
        "restaurant": "nonna",
        "title": "Pasta Family Pack",
        "category": "discount",
        "price_cents": 900,
        "original_price_cents": 2400,
        "distance_km": 2.4,
        "pickup_start": "19:15",
        "pickup_end": "20:00",
        "quantity": 5,
    },
]
