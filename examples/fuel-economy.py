import os
import sys

from dataidioms import datasets, explore, plotting
from dataidioms.dataframe import Dataframe, col
from dataidioms.utils.tabulate import tabulate

output_dir = sys.argv[1] if len(sys.argv) > 1 else "."

cars = datasets.fuel_economy()

# Structure of the data
print(explore.glimpse(cars))

# Summary statistics
print(tabulate(explore.describe(cars)))
print("Median highway mpg:", explore.summary_stat(cars, "hwy", "median"))

# Categorical summaries
print(tabulate(explore.proportions(cars, "drv")))
print(tabulate(explore.crosstab(cars, "class", "drv")))

# Grouping and aggregation
df = Dataframe(cars) \
  .filter(col("year") == 2008) \
  .group_by("manufacturer") \
  .summarize(models=("n", None), mean_hwy=("mean", "hwy"), max_displ=("max", "displ")) \
  .arrange("mean_hwy", descending=True)
print(df)

# Visualization
plotting.save_figure(plotting.histogram(cars, "hwy", bins=10, title="Highway mpg"),
                     os.path.join(output_dir, "hwy.png"))
plotting.save_figure(plotting.scatter(cars, "displ", "hwy", color_by="drv"),
                     os.path.join(output_dir, "displ_hwy.png"))
plotting.save_figure(plotting.boxplot(cars, "cty", by="class"),
                     os.path.join(output_dir, "cty_by_class.png"))
plotting.save_figure(plotting.bar_chart(cars, "class", horizontal=True),
                     os.path.join(output_dir, "classes.png"))
