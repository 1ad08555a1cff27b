"""CSV export of group assignments and pair matrices."""

from .writers import export_groups_csv, export_rating_matrix_csv, groups_to_frame, rating_matrix

__all__ = ["export_groups_csv", "export_rating_matrix_csv", "groups_to_frame", "rating_matrix"]
