"""Business hours domain"""
