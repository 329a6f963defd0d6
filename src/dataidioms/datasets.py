"""Example datasets used throughout the guide.

Every idiom is shown on a small, realistic table,
so that the results can be checked by eye:

* :func:`fuel_economy` -- fuel economy of popular car models.
* :func:`coffee_ratings` -- professional ratings of coffee samples.
* :func:`listings` -- short term accommodation listings.
* :func:`sports_finance` -- revenues and expenses of college sports programs.

Each dataset contains a few missing values on purpose,
so that the missing values idioms have something to work on.

Datasets are also available by name:

>>> from dataidioms import datasets
>>> datasets.names()
['coffee_ratings', 'fuel_economy', 'listings', 'sports_finance']
>>> datasets.load("listings").num_rows
12
"""

from typing import Callable

import pyarrow as pa

__all__ = ("fuel_economy", "coffee_ratings", "listings", "sports_finance", "load", "names")


def fuel_economy() -> pa.Table:
    """Fuel economy of car models sold in 1999 and 2008.

    ``displ`` is the engine displacement in litres, ``cty`` and ``hwy``
    the miles per gallon in city and highway driving, ``drv`` the
    drive train (``f`` front, ``r`` rear, ``4`` four wheels).
    """
    return pa.table(
        {
            "manufacturer": [
                "audi", "audi", "chevrolet", "chevrolet", "dodge", "dodge",
                "ford", "ford", "honda", "honda", "hyundai", "nissan",
                "subaru", "toyota", "toyota", "volkswagen",
            ],
            "model": [
                "a4", "a4 quattro", "c1500 suburban 2wd", "corvette", "caravan 2wd",
                "ram 1500 pickup 4wd", "mustang", "explorer 4wd", "civic", "civic",
                "sonata", "altima", "forester awd", "corolla", "camry", "jetta",
            ],
            "year": pa.array(
                [1999, 2008, 2008, 1999, 2008, 1999, 2008, 1999, 1999, 2008,
                 2008, 2008, 1999, 2008, 1999, 2008],
                pa.int64(),
            ),
            "displ": [1.8, 2.0, 5.3, 5.7, 3.3, 5.2, 4.0, 4.0, 1.6, 1.8, 2.4, 2.5, 2.5, 1.8, 2.2, 2.0],
            "cyl": pa.array([4, 4, 8, 8, 6, 8, 6, 6, 4, 4, 4, 4, 4, 4, 4, 4], pa.int64()),
            "drv": ["f", "4", "r", "r", "f", "4", "r", "4", "f", "f", "f", "f", "4", "f", "f", "f"],
            "cty": pa.array([18, 20, 14, 16, 17, 11, 17, 14, 24, 26, 21, 23, 18, 28, 21, 21], pa.int64()),
            "hwy": pa.array(
                [29, 28, 20, 26, 24, 15, 26, None, 32, 34, 31, 32, 24, 37, None, 29],
                pa.int64(),
            ),
            "class": [
                "compact", "compact", "suv", "2seater", "minivan", "pickup",
                "subcompact", "suv", "subcompact", "subcompact", "midsize",
                "midsize", "suv", "compact", "midsize", "compact",
            ],
        }
    )


def coffee_ratings() -> pa.Table:
    """Cupping scores of coffee samples.

    ``aroma`` and ``flavor`` are graded from 0 to 10,
    ``total_cup_points`` is the overall score out of 100.
    """
    return pa.table(
        {
            "species": [
                "Arabica", "Arabica", "Arabica", "Arabica", "Arabica", "Arabica",
                "Arabica", "Arabica", "Robusta", "Robusta",
            ],
            "country_of_origin": [
                "Ethiopia", "Ethiopia", "Guatemala", "Brazil", "Colombia",
                "Colombia", "Brazil", "Kenya", "India", "Uganda",
            ],
            "variety": [
                None, "Other", "Bourbon", "Bourbon", "Caturra",
                "Typica", "Yellow Bourbon", "SL28", None, None,
            ],
            "aroma": [8.67, 8.75, 8.42, 7.58, 7.83, 7.92, 7.67, 8.25, 7.83, 7.92],
            "flavor": [8.83, 8.67, 8.50, 7.58, 7.75, 7.83, None, 8.33, 8.00, 7.67],
            "total_cup_points": [90.58, 89.92, 87.17, 82.83, 83.42, 84.0, 82.5, 86.25, 83.75, 82.5],
            "altitude_mean_meters": [2075.0, 2000.0, 1700.0, None, 1750.0, None, 1100.0, 1850.0, 1000.0, 1300.0],
        }
    )


def listings() -> pa.Table:
    """Short term rental listings of a city.

    ``price`` is per night, ``reviews_per_month`` is missing
    for listings that never received a review.
    """
    return pa.table(
        {
            "listing_id": pa.array(range(1, 13), pa.int64()),
            "neighbourhood": [
                "Centre", "Centre", "Centre", "Riverside", "Riverside", "Old Town",
                "Old Town", "Old Town", "Harbour", "Harbour", "Riverside", "Centre",
            ],
            "room_type": [
                "Entire home/apt", "Private room", "Entire home/apt", "Private room",
                "Entire home/apt", "Entire home/apt", "Shared room", "Private room",
                "Entire home/apt", "Private room", "Entire home/apt", "Entire home/apt",
            ],
            "price": pa.array([120, 65, 180, 45, 95, 150, 30, 70, 210, 60, 110, None], pa.int64()),
            "minimum_nights": pa.array([2, 1, 3, 1, 2, 2, 1, 1, 5, 2, 3, 30], pa.int64()),
            "number_of_reviews": pa.array([54, 12, 0, 103, 8, 77, 0, 25, 14, 3, 0, 1], pa.int64()),
            "reviews_per_month": [1.9, 0.4, None, 3.1, 0.3, 2.2, None, 0.9, 0.5, 0.1, None, 0.1],
        }
    )


def sports_finance() -> pa.Table:
    """Revenues and expenditures of college sports, in thousands of dollars.

    Programs where only one gender competes have missing
    values for the other gender.
    """
    return pa.table(
        {
            "year": pa.array([2018, 2018, 2018, 2018, 2019, 2019, 2019, 2019, 2019], pa.int64()),
            "institution": [
                "Alpha State", "Alpha State", "Beta College", "Beta College",
                "Alpha State", "Alpha State", "Beta College", "Beta College", "Gamma Tech",
            ],
            "sport": [
                "Basketball", "Football", "Basketball", "Volleyball",
                "Basketball", "Football", "Basketball", "Volleyball", "Basketball",
            ],
            "revenue_men": pa.array([1200, 5400, 310, None, 1350, 5900, 330, None, 640], pa.int64()),
            "revenue_women": pa.array([450, None, 120, 210, 480, None, 135, 220, 300], pa.int64()),
            "expenditure_men": pa.array([1100, 4800, 300, None, 1150, 5100, 320, None, 600], pa.int64()),
            "expenditure_women": pa.array([500, None, 140, 200, 520, None, 150, 230, 310], pa.int64()),
        }
    )


DATASETS: dict[str, Callable[[], pa.Table]] = {
    "fuel_economy": fuel_economy,
    "coffee_ratings": coffee_ratings,
    "listings": listings,
    "sports_finance": sports_finance,
}


def names() -> list[str]:
    """Names of the available datasets."""
    return sorted(DATASETS)


def load(name: str) -> pa.Table:
    """Load a dataset by its name.

    Raises ``KeyError`` for an unknown name.
    """
    try:
        factory = DATASETS[name]
    except KeyError:
        raise KeyError(f"Unknown dataset {name!r}, available datasets: {names()}") from None
    return factory()
