import pyarrow.compute as pc

from dataidioms import datasets, plotting
from dataidioms.dataframe import Dataframe, col

finance = Dataframe(datasets.sports_finance())

# Applying functions across columns
money = ["revenue_men", "revenue_women", "expenditure_men", "expenditure_women"]
totals = finance \
  .mutate_across(money, lambda values: pc.multiply(values, 1000)) \
  .row_aggregate("total_revenue", "sum", ["revenue_men", "revenue_women"], skip_nulls=True) \
  .row_aggregate("total_expenditure", "sum", ["expenditure_men", "expenditure_women"], skip_nulls=True) \
  .mutate(profit=col("total_revenue") - col("total_expenditure"))
print(totals.select("year", "institution", "sport", "total_revenue", "total_expenditure", "profit"))

# Wide to long, and back
longer = finance \
  .select("year", "institution", "sport", "revenue_men", "revenue_women") \
  .pivot_longer(["revenue_men", "revenue_women"], names_to="gender", values_to="revenue") \
  .drop_nulls("revenue") \
  .collect()
print(longer)
print(longer.group_by("institution", "gender").summarize(revenue=("sum", "revenue")))
print(longer.pivot_wider(["year", "institution", "sport"], names_from="gender", values_from="revenue"))

figure = plotting.line_chart(
  totals.group_by("year", "institution").summarize(revenue=("sum", "total_revenue")).to_arrow(),
  "year", "revenue", group_by="institution", title="Revenue by institution",
)
plotting.save_figure(figure, "revenue.png")
