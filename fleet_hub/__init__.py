"""Rental Fleet UAE content hub: programmatic SEO pages, blog and keyword guides."""
