# optional: store analyses in the warehouse and export them for BI
import json
from pathlib import Path
from typing import Dict, Sequence, Tuple
import pandas as pd
from .io_utils import write_df
from .schemas import AnalysisRecord

ANALYSIS_TABLE = "gold_product_analysis"
FEATURE_TABLE = "gold_product_features"

PRODUCT_COLS = ["product_name", "category", "overall_sentiment", "review_count", "source",
                "most_appreciated", "least_appreciated"]
FEATURE_COLS = ["product_name", "feature", "mentions", "positive", "negative"]

_SEP = "; "


def analyses_to_frames(records: Sequence[AnalysisRecord]) -> Tuple[pd.DataFrame, pd.DataFrame]:
    products, features = [], []
    for r in records:
        products.append({
            "product_name": r.product_name,
            "category": r.category,
            "overall_sentiment": r.summary.overall_sentiment,
            "review_count": int(r.review_count),
            "source": r.source,
            "most_appreciated": _SEP.join(r.summary.most_appreciated),
            "least_appreciated": _SEP.join(r.summary.least_appreciated),
        })
        for name, f in r.features.items():
            features.append({
                "product_name": r.product_name,
                "feature": name,
                "mentions": int(f.mentions),
                "positive": _SEP.join(f.positive),
                "negative": _SEP.join(f.negative),
            })
    return pd.DataFrame(products, columns=PRODUCT_COLS), pd.DataFrame(features, columns=FEATURE_COLS)


def save_analyses(records: Sequence[AnalysisRecord], con=None) -> int:
    products, features = analyses_to_frames(records)
    write_df(ANALYSIS_TABLE, products, mode="replace", con=con)
    write_df(FEATURE_TABLE, features, mode="replace", con=con)
    print(f"[info] saved {len(products)} products / {len(features)} features to {ANALYSIS_TABLE}")
    return len(products)


def export_analyses(records: Sequence[AnalysisRecord], out_dir: str = "data/enriched") -> Dict[str, str]:
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)
    products, features = analyses_to_frames(records)

    paths = {
        "products_csv": str(out / "product_analysis.csv"),
        "features_csv": str(out / "product_features.csv"),
        "json": str(out / "product_analysis.json"),
    }
    products.to_csv(paths["products_csv"], index=False)
    features.to_csv(paths["features_csv"], index=False)
    Path(paths["json"]).write_text(
        json.dumps([r.to_dict() for r in records], indent=2, ensure_ascii=False), encoding="utf-8"
    )
    return paths
