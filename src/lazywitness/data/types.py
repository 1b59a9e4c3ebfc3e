# Copyright 2025 Zhiyuan Yu (Heemskerk's lab, University of Michigan)
from typing import Annotated, Literal

from pydantic import Field

Index_t = Annotated[int, Field(ge=0)]
Size_t = Annotated[int, Field(ge=0)]
Diameter_t = Annotated[float, Field(ge=0)]

SizeLandmarks = Annotated[int, Field(ge=1)]
NeighborRank = Annotated[int, Field(ge=0)]
NumDivisions = Annotated[int, Field(ge=1)]

IndexListLandmarks = list[Index_t]

EmbeddingMethod = Literal["pca", "diffmap", "umap", "tsne", "scvi"]

# how the witness radius of an edge is derived from the witness scan
RadiusPolicy = Literal["argmin_witness", "last_witness", "min_witness"]
