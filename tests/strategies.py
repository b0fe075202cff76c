"""Hypothesis strategies for property-based testing of klaw-relay."""

from hypothesis import strategies as st

# -----------------------------------------------------------------------------
# Relay configuration
# -----------------------------------------------------------------------------

limits = st.none() | st.integers(min_value=0, max_value=5)

# -----------------------------------------------------------------------------
# Relay operations
# -----------------------------------------------------------------------------

# Small value range so duplicate suppression actually triggers
sends = st.tuples(st.just('send'), st.integers(min_value=0, max_value=3))
attaches = st.just(('attach',))
detaches = st.just(('detach',))
pauses = st.tuples(st.just('pause'), st.booleans())

operations = st.lists(
    st.one_of(sends, sends, attaches, detaches, pauses),
    max_size=60,
)
