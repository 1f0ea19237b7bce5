"""
Input dispatch core: types, binary codec, portals, environment and dispatcher
"""
