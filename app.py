import logging

import streamlit as st
import pandas as pd
import numpy as np
import plotly.express as px

from radixtree import Tree, render
from workloads import WorkLoad, WorkLoadConfig
from workloads.bench import run_benchmark, summarize, tree_stats

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# Configure page
st.set_page_config(
    page_title="RadixBench",
    page_icon="🌳",
    layout="wide",
    initial_sidebar_state="expanded"
)

st.title("🌳 RadixBench")
st.markdown("---")

# Sidebar
with st.sidebar:
    st.header("Workload")
    kind = st.selectbox("Key source", ["words", "urls", "ips"])
    num_keys = st.number_input("Number of keys", min_value=1, max_value=200_000, value=5_000, step=1_000)
    seed = st.number_input("Seed", min_value=0, value=42, step=1)
    prefix_freq = 0.0
    unique = False
    ip_packed = False
    if kind == "words":
        prefix_freq = st.slider("Prefix frequency", 0.0, 1.0, 0.3)
        unique = st.checkbox("Unique words", value=False)
    elif kind == "ips":
        ip_packed = st.checkbox("Packed 4-byte keys", value=False)

    st.markdown("---")
    operations = st.multiselect("Operations", ["set", "get", "delete"], default=["set", "get", "delete"])
    run = st.button("▶️ Run benchmark")

if run:
    try:
        config = WorkLoadConfig(
            kind=kind,
            num_keys=int(num_keys),
            seed=int(seed),
            prefix_freq=prefix_freq,
            unique=unique,
            ip_packed=ip_packed,
        )
        keys = WorkLoad(config).keys()
    except ValueError as e:
        st.error(f"❌ Invalid workload: {e}")
        st.stop()

    tree = Tree()
    # "set" always runs first so the other operations have something to act on
    ops = ["set"] + [op for op in operations if op != "set"]
    timings = run_benchmark(keys, ops, tree=tree)
    st.session_state["timings"] = timings
    st.session_state["summary"] = summarize(timings)

    # rebuild a populated tree for shape statistics, since "delete" empties it
    shape = Tree()
    shape.batch_set((k, i) for i, k in enumerate(keys))
    st.session_state["stats"] = tree_stats(shape)
    st.session_state["sample"] = keys[:25]

if "timings" in st.session_state:
    df = st.session_state["timings"]
    stats = st.session_state["stats"]

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("Distinct keys", f"{stats['keys']:,}")
    with col2:
        st.metric("Nodes", f"{stats['nodes']:,}")
    with col3:
        st.metric("Avg branch factor", f"{stats['avg_branch_factor']:.2f}")
    with col4:
        st.metric("Mean key length", f"{np.mean(df['key_length']):.1f} B")

    tab1, tab2, tab3 = st.tabs(["Latency", "Key length", "Tree sample"])

    with tab1:
        st.subheader("Latency summary (ns)")
        st.dataframe(st.session_state["summary"], use_container_width=True)
        fig = px.box(df, x="operation", y="ns", points=False, log_y=True,
                     title="Per-operation latency")
        st.plotly_chart(fig, use_container_width=True)

    with tab2:
        by_len = (
            df.groupby(["operation", "key_length"], as_index=False)["ns"]
            .median()
            .rename(columns={"ns": "median_ns"})
        )
        fig_len = px.line(by_len, x="key_length", y="median_ns", color="operation",
                          title="Median latency by key length")
        st.plotly_chart(fig_len, use_container_width=True)

    with tab3:
        sample = Tree()
        sample.batch_set((k, i) for i, k in enumerate(st.session_state["sample"]))
        st.code(render(sample), language=None)
        st.dataframe(
            pd.DataFrame(
                [(k.decode("utf-8", "backslashreplace"), v) for k, v in sample.items()],
                columns=["key", "value"],
            ),
            use_container_width=True,
        )
else:
    st.info("👈 Pick a workload and press Run benchmark")

# Footer
st.markdown("---")
st.markdown(
    """
    <div style='text-align: center; color: #B0B0B0; padding: 1rem;'>
        Built with Streamlit 🚀 | RadixBench
    </div>
    """,
    unsafe_allow_html=True
)
