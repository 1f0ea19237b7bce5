"""
Rollup server integration layer: address book, transports, protocol loop, tester
"""
