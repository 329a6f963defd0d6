import pandas

from dataidioms import datasets
from dataidioms.dataframe import Dataframe, col

cars = datasets.fuel_economy()

df = Dataframe(cars) \
  .filter(col("cyl") == 4) \
  .group_by("manufacturer") \
  .summarize(mean_hwy=("mean", "hwy"), sd_hwy=("sd", "hwy")) \
  .arrange("manufacturer")
print(df)

pdf = cars.to_pandas()
print(
  pdf[pdf["cyl"] == 4]
  .groupby("manufacturer")
  .agg(mean_hwy=("hwy", "mean"), sd_hwy=("hwy", "std"))
  .reset_index()
)

assert isinstance(df.to_pandas(), pandas.DataFrame)
