"""wgnet command line interface"""
