"""HTTP surface for the barter exchange"""
