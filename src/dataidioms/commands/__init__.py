"""Shell commands exposing the guide idioms.

Explore
=======

``idioms-explore`` runs the exploration idioms on a file
or on one of the example datasets::

    idioms-explore --dataset fuel_economy --glimpse --describe --missing

It can also count categories, summarize groups,
draw a histogram and save the result::

    idioms-explore cars.csv --count class
    idioms-explore cars.csv --group-by class --summarize mean_hwy=mean:hwy --output by_class.csv
    idioms-explore --dataset listings --hist price --plot-output price.png

When no idiom is requested, the first rows of the data are printed.
"""
