"""
Pydantic request and response bodies for the REST API.

JSON keys are camelCase on the wire; Python attributes stay snake_case.
Request fields are optional so that missing values reach the services and
are reported as 400 with a readable message.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Users ---

class Credentials(CamelModel):
    username: Optional[str] = None
    password: Optional[str] = None


class UserOut(CamelModel):
    id: int
    username: str


class LoginResponse(CamelModel):
    success: bool = True
    token: str
    token_type: str = "bearer"
    user: UserOut


class RegisterResponse(CamelModel):
    success: bool = True
    user: UserOut


class MeResponse(CamelModel):
    user: UserOut


# --- Playlists ---

class PlaylistCreate(CamelModel):
    name: Optional[str] = None
    video_limit: Optional[int] = None
    does_owner_vote_count: Optional[int] = None


class PlaylistUpdate(CamelModel):
    name: Optional[str] = None
    video_limit: Optional[int] = None
    does_owner_vote_count: Optional[int] = None


class Playlist(CamelModel):
    id: int
    name: str
    video_limit: int
    does_owner_vote_count: int
    user_id: int
    created_at: str


class PlaylistList(CamelModel):
    playlists: List[Playlist]


class PlaylistResponse(CamelModel):
    playlist: Playlist


class PlaylistSaved(CamelModel):
    success: bool = True
    message: str
    playlist: Playlist


class ContributorAdd(CamelModel):
    username: Optional[str] = None


class ContributorList(CamelModel):
    contributors: List[UserOut]


class ContributorAdded(CamelModel):
    success: bool = True
    contributor: UserOut


class MessageResponse(CamelModel):
    success: bool = True
    message: str


# --- Videos ---

class VideoSubmission(CamelModel):
    links: Optional[List[str]] = None


class Video(CamelModel):
    id: int
    link: str
    playlist_id: int
    user_id: int
    created_at: str


class VideoList(CamelModel):
    videos: List[Video]


class VideosSubmitted(CamelModel):
    message: str = "Videos added successfully"
    videos: List[Video]


# --- Scores ---

class ScoreSubmit(CamelModel):
    score: Optional[int] = None
    comment: Optional[str] = Field(None, max_length=2000)


class Score(CamelModel):
    id: int
    score: int
    comment: Optional[str] = None
    user_id: int
    video_id: int
    created_at: str
    updated_at: str


class ScoreResponse(CamelModel):
    score: Score


class ScoreSaved(CamelModel):
    success: bool = True
    score: Score


class ScoreList(CamelModel):
    scores: List[Score]


class RankedScore(CamelModel):
    user_id: int
    username: str
    score: int
    comment: Optional[str] = None
    counted: bool


class Ranking(CamelModel):
    video_id: int
    link: str
    user_id: int
    average: Optional[float] = None
    count: int
    scores: List[RankedScore]


class Rankings(CamelModel):
    playlist: Playlist
    rankings: List[Ranking]
