import os
import sys

import pyarrow.compute as pc

from dataidioms import datasets, plotting
from dataidioms.dataframe import Dataframe, col

output_dir = sys.argv[1] if len(sys.argv) > 1 else "."

listings = Dataframe(datasets.listings())

# Building a dataframe by hand
areas = Dataframe.from_pylist([
  {"neighbourhood": "Centre", "zone": "Z1", "walkable": True},
  {"neighbourhood": "Old Town", "zone": "Z1", "walkable": True},
  {"neighbourhood": "Riverside", "zone": "Z2", "walkable": False},
])

# Wrangling: join, derived columns, filtering and sorting
affordable = listings \
  .join(areas, on="neighbourhood", how="left") \
  .mutate(
    price_per_stay=col("price") * col("minimum_nights"),
    popular=col("number_of_reviews") > 20,
  ) \
  .apply("room_type", lambda room: room.split()[0].lower(), into="room") \
  .filter(col("price") < 150) \
  .arrange("zone", "price", descending=[False, True]) \
  .select("listing_id", "neighbourhood", "zone", "room", "price", "price_per_stay", "popular")
print(affordable.explain())
print(affordable)

# Counting and distinct values
print(listings.count("neighbourhood", "room_type", sort=True))
print(listings.distinct("room_type"))

# Saving the results
affordable.to_csv(os.path.join(output_dir, "affordable.csv"))
affordable.to_parquet(os.path.join(output_dir, "affordable.parquet"))

by_neighbourhood = listings \
  .fill_nulls(reviews_per_month=0.0) \
  .mutate_across(["reviews_per_month"], pc.round, "{column}_rounded") \
  .group_by("neighbourhood") \
  .summarize(median_price=("median", "price"), reviews=("sum", "reviews_per_month"))
by_neighbourhood.to_csv(os.path.join(output_dir, "neighbourhoods.csv"))

plotting.save_figure(plotting.bar_chart(datasets.listings(), "room_type"),
                     os.path.join(output_dir, "room_types.png"))
