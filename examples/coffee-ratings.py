from dataidioms import datasets, explore
from dataidioms.dataframe import Dataframe, col
from dataidioms.utils.tabulate import tabulate

coffee = datasets.coffee_ratings()

# How much is missing?
print(tabulate(explore.missing_counts(coffee)))
print(tabulate(explore.value_counts(coffee, "variety", dropna=False)))

# Statistics ignore missing values unless asked not to
print("Mean flavor:", explore.summary_stat(coffee, "flavor", "mean"))
print("Mean flavor without skipping:", explore.summary_stat(coffee, "flavor", "mean", skip_nulls=False))

df = Dataframe(coffee)

# Drop rows missing the variety
print(df.drop_nulls("variety").select("country_of_origin", "variety", "total_cup_points"))

# Replace missing values with a label or a statistic
print(
  df.fill_nulls(variety="Unknown")
    .impute("altitude_mean_meters", stat="median")
    .impute("flavor")
    .select("variety", "flavor", "altitude_mean_meters")
)

# Best rated coffees of each species
print(
  df.filter(col("total_cup_points") > 83)
    .group_by("species")
    .summarize(samples=("n", None), best=("max", "total_cup_points"), countries=("n_distinct", "country_of_origin"))
)
