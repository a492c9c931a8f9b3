"""Passive tailing components: channel filter, session resolver, cursor state, reader."""
