from typing import Optional
import duckdb
import pandas as pd
from pathlib import Path
from .config import CFG

_conn: Optional[duckdb.DuckDBPyConnection] = None


def conn(path: Optional[str] = None):
    """Shared warehouse connection, opened on first use."""
    global _conn
    if _conn is None:
        db_path = path or CFG.duckdb_path
        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        _conn = duckdb.connect(db_path)
    return _conn


def write_df(table: str, df: pd.DataFrame, mode: str = "append", con=None, chunk_rows: int = 100_000):
    """
    mode='replace'  -> CREATE OR REPLACE TABLE ... AS SELECT * FROM _df
    mode='append'   -> chunked INSERTs to keep memory bounded
    """
    c = con or conn()
    if mode not in {"append", "replace"}:
        raise ValueError(f"unknown write mode: {mode}")

    if mode == "replace":
        c.register("_df", df)
        c.execute(f"CREATE OR REPLACE TABLE {table} AS SELECT * FROM _df;")
        c.unregister("_df")
        return

    # Make sure table exists before appending
    cols = ",".join([f"{col} {duck_type(df[col])}" for col in df.columns])
    c.execute(f"CREATE TABLE IF NOT EXISTS {table} ({cols});")

    start = 0
    n = len(df)
    while start < n:
        end = min(start + chunk_rows, n)
        c.register("_df_chunk", df.iloc[start:end])
        c.execute(f"INSERT INTO {table} SELECT * FROM _df_chunk;")
        c.unregister("_df_chunk")
        start = end

_TYPE_MAP = {"int64":"BIGINT","float64":"DOUBLE","object":"TEXT","datetime64[ns]":"TIMESTAMP","bool":"BOOLEAN"}

def duck_type(series):
    return _TYPE_MAP.get(str(series.dtype), "TEXT")
