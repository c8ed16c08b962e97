"""
Superstore Dataset Generator
Generates a synthetic super_store.csv with the source headers and MM/DD/YYYY dates.
"""

import argparse
from datetime import date, timedelta
from pathlib import Path

import numpy as np
import polars as pl
from faker import Faker

fake = Faker("en_US")
rng = np.random.default_rng(42)
Faker.seed(42)

OUTPUT_DIR = Path(__file__).parent.parent / "data"

SEGMENTS = ["Consumer", "Corporate", "Home Office"]
SHIP_MODES = {"Standard Class": (4, 7), "Second Class": (2, 5), "First Class": (1, 3), "Same Day": (0, 1)}
REGIONS = {
    "East": ["New York", "Pennsylvania", "Ohio", "Massachusetts"],
    "West": ["California", "Washington", "Oregon", "Arizona"],
    "Central": ["Texas", "Illinois", "Michigan", "Minnesota"],
    "South": ["Florida", "Georgia", "Virginia", "Tennessee"],
}
CATEGORIES = {
    "Furniture": ["Bookcases", "Chairs", "Furnishings", "Tables"],
    "Office Supplies": ["Art", "Binders", "Paper", "Storage", "Supplies"],
    "Technology": ["Accessories", "Copiers", "Machines", "Phones"],
}
CATEGORY_CODES = {"Furniture": "FUR", "Office Supplies": "OFF", "Technology": "TEC"}
SUBCATEGORY_CODES = {sub: sub[:2].upper() for subs in CATEGORIES.values() for sub in subs}


def generate_customers(n: int = 800) -> pl.DataFrame:
    print(f"Generating {n:,} customers...")
    states = [(region, state) for region, states in REGIONS.items() for state in states]
    picks = rng.integers(0, len(states), n)
    return pl.DataFrame({
        "Customer ID": [f"{fake.random_uppercase_letter()}{fake.random_uppercase_letter()}-{10000 + i}" for i in range(n)],
        "Customer Name": [fake.name() for _ in range(n)],
        "Segment": rng.choice(SEGMENTS, n, p=[0.52, 0.30, 0.18]),
        "Region": [states[p][0] for p in picks],
        "State": [states[p][1] for p in picks],
        "City": [fake.city() for _ in range(n)],
        "Postal Code": [fake.zipcode() for _ in range(n)],
    })


def generate_products(n: int = 1200) -> pl.DataFrame:
    print(f"Generating {n:,} products...")
    pairs = [(cat, sub) for cat, subs in CATEGORIES.items() for sub in subs]
    picks = rng.integers(0, len(pairs), n)
    return pl.DataFrame({
        "Product ID": [
            f"{CATEGORY_CODES[pairs[p][0]]}-{SUBCATEGORY_CODES[pairs[p][1]]}-{10000000 + i}"
            for i, p in enumerate(picks)
        ],
        "Category": [pairs[p][0] for p in picks],
        "Sub-Category": [pairs[p][1] for p in picks],
        "Product Name": [f"{fake.company()} {pairs[p][1].rstrip('s')}" for p in picks],
        "unit_price": np.round(rng.lognormal(3.5, 1.1, n), 2),
    })


def generate_order_lines(n_orders: int, customers: pl.DataFrame, products: pl.DataFrame) -> pl.DataFrame:
    print(f"Generating lines for {n_orders:,} orders...")
    start = date(2014, 1, 1)
    rows = []
    customer_rows = customers.to_dicts()
    product_rows = products.to_dicts()

    for i in range(n_orders):
        customer = customer_rows[rng.integers(0, len(customer_rows))]
        order_date = start + timedelta(days=int(rng.integers(0, 4 * 365)))
        ship_mode = str(rng.choice(list(SHIP_MODES), p=[0.6, 0.2, 0.15, 0.05]))
        low, high = SHIP_MODES[ship_mode]
        ship_date = order_date + timedelta(days=int(rng.integers(low, high + 1)))
        order_id = f"US-{order_date.year}-{100000 + i}"

        for _ in range(int(rng.integers(1, 6))):
            product = product_rows[rng.integers(0, len(product_rows))]
            quantity = int(rng.integers(1, 10))
            discount = float(rng.choice([0.0, 0.0, 0.0, 0.1, 0.2, 0.3, 0.5, 0.8]))
            sales = round(product["unit_price"] * quantity * (1 - discount), 4)
            margin = rng.normal(0.15, 0.12) - discount * 0.9
            rows.append({
                "Order ID": order_id,
                "Order Date": order_date.strftime("%m/%d/%Y"),
                "Ship Date": ship_date.strftime("%m/%d/%Y"),
                "Ship Mode": ship_mode,
                "Customer ID": customer["Customer ID"],
                "Customer Name": customer["Customer Name"],
                "Segment": customer["Segment"],
                "Country": "United States",
                "City": customer["City"],
                "State": customer["State"],
                "Postal Code": customer["Postal Code"],
                "Region": customer["Region"],
                "Product ID": product["Product ID"],
                "Category": product["Category"],
                "Sub-Category": product["Sub-Category"],
                "Product Name": product["Product Name"],
                "Sales": sales,
                "Quantity": quantity,
                "Discount": discount,
                "Profit": round(sales * margin, 4),
            })

    df = pl.DataFrame(rows).with_row_index("Row ID", offset=1)
    return df


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate a synthetic super_store.csv")
    parser.add_argument("--orders", type=int, default=5000, help="Number of orders (default: 5000)")
    parser.add_argument("--output", type=Path, default=OUTPUT_DIR / "super_store.csv", help="Output CSV path")
    args = parser.parse_args()

    customers = generate_customers()
    products = generate_products()
    lines = generate_order_lines(args.orders, customers, products)

    args.output.parent.mkdir(parents=True, exist_ok=True)
    lines.write_csv(args.output)
    print(f"{args.output.name}: {len(lines):,} lines for {args.orders:,} orders")


if __name__ == "__main__":
    main()
