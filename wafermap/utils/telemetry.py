import time
import functools
import logging
import psutil
import os
import pandas as pd
import streamlit as st
from streamlit import runtime
from typing import Optional, Any, List, Dict
from datetime import datetime

logger = logging.getLogger("PerformanceMonitor")

class PerformanceMonitor:
    """
    Centralized store for performance metrics.
    Keeps a bounded, newest-first log. Inside the Streamlit viewer the log
    lives in Session State, so each browser session sees only its own
    timings; elsewhere (CLI, tests) it lives in process memory.
    """
    SESSION_KEY = "performance_metrics_log"
    MAX_ENTRIES = 50
    _process_logs: List[Dict[str, Any]] = []

    @staticmethod
    def get_logs() -> List[Dict[str, Any]]:
        if runtime.exists():
            if PerformanceMonitor.SESSION_KEY not in st.session_state:
                st.session_state[PerformanceMonitor.SESSION_KEY] = []
            return st.session_state[PerformanceMonitor.SESSION_KEY]
        return PerformanceMonitor._process_logs

    @staticmethod
    def log_event(operation: str, duration_sec: float, memory_delta_mb: float = 0.0, details: str = ""):
        entry = {
            "Timestamp": datetime.now().strftime("%H:%M:%S"),
            "Operation": operation,
            "Duration (s)": round(duration_sec, 4),
            "Memory Delta (MB)": round(memory_delta_mb, 2),
            "Details": details
        }

        logs = PerformanceMonitor.get_logs()
        logs.insert(0, entry)
        if len(logs) > PerformanceMonitor.MAX_ENTRIES:
            logs.pop()

        logger.info(f"PERF | {operation} | {duration_sec:.4f}s | {memory_delta_mb:.2f}MB | {details}")

    @staticmethod
    def clear_logs():
        if runtime.exists():
            st.session_state[PerformanceMonitor.SESSION_KEY] = []
        else:
            PerformanceMonitor._process_logs.clear()

    @staticmethod
    def to_dataframe() -> pd.DataFrame:
        return pd.DataFrame(PerformanceMonitor.get_logs())

def get_process_memory_mb() -> float:
    """Returns current process memory usage in MB."""
    process = psutil.Process(os.getpid())
    return process.memory_info().rss / 1024 / 1024

def track_performance(operation_name: Optional[str] = None):
    """
    Decorator to track execution time and memory impact of a function.
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            op_name = operation_name or func.__name__

            start_time = time.perf_counter()
            start_mem = get_process_memory_mb()

            try:
                result = func(*args, **kwargs)
                return result
            finally:
                end_time = time.perf_counter()
                end_mem = get_process_memory_mb()

                duration = end_time - start_time
                mem_delta = end_mem - start_mem

                PerformanceMonitor.log_event(op_name, duration, mem_delta)

        return wrapper
    return decorator
