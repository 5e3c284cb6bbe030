from __future__ import annotations

import os

import streamlit as st

from socialscrape.pipeline import refine
from socialscrape.query import count_by_period
from socialscrape.render import styled_table, timeline_figure
from socialscrape.sources.csv_sample import CsvSource
from socialscrape.table import posts_frame


@st.cache_data
def load_posts(path: str):
    return posts_frame(CsvSource(path).fetch())


st.set_page_config(page_title="socialscrape", layout="wide")

st.title("socialscrape – Posts")

table_path = os.getenv("SOCIALSCRAPE_TABLE_PATH", "./data/sample_posts.csv")

df = load_posts(table_path)

col1, col2, col3, col4 = st.columns(4)
with col1:
    contains = st.text_input("Text contains", "")
with col2:
    max_likes = int(df["likes"].max()) if len(df) else 0
    min_likes = st.slider("Min likes", 0, max(1, max_likes), 0)
with col3:
    sort_by = st.selectbox("Sort by", ["likes", "retweets", "replies", "quotes", "created_at"])
with col4:
    freq = st.selectbox("Bucket", ["h", "D", "W"], index=1)

st.caption(f"Table: `{table_path}`")

view = refine(df, contains=contains or None, min_likes=min_likes, sort_by=sort_by)
st.write(f"Showing **{len(view)}** of {len(df)} posts")

if len(view):
    st.plotly_chart(timeline_figure(count_by_period(view, freq=freq)), use_container_width=True)

st.dataframe(styled_table(view), use_container_width=True)
