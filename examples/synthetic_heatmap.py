"""Render a heatmap from six weeks of synthetic TPS samples.

    python examples/synthetic_heatmap.py [out.png]
"""

import sys

import numpy as np
import pandas as pd

from tpsheatmap import HeatmapOptions, configure_logging
from tpsheatmap.render import render_heatmap

configure_logging(level="INFO")

rng = np.random.default_rng(0)
timestamps = pd.date_range("2024-03-18", "2024-04-28 23:59:00", freq="30s", tz="UTC")
hour = timestamps.hour.to_numpy() + timestamps.minute.to_numpy() / 60.0

# a server that slows down every evening, with a two-hour outage on April 9
values = 20.0 - 8.0 * np.exp(-((hour - 20.0) ** 2) / 4.0) + rng.normal(0.0, 0.5, len(timestamps))
outage = (timestamps >= "2024-04-09 13:00") & (timestamps < "2024-04-09 15:00")
timestamps, values = timestamps[~outage], values[~outage]

options = HeatmapOptions(day_width_columns=144, day_height=40, comment=f"{len(values)} synthetic samples")
image = render_heatmap(timestamps, values, options)

out = sys.argv[1] if len(sys.argv) > 1 else "synthetic_tps.png"
image.save(out)
print(f"wrote {out} ({image.width}x{image.height})")
