"""FitTrack: workout, weight, water, sleep and goal tracking on Streamlit + Supabase."""

__version__ = "0.3.0"
