# Import all models here so create_all() sees every table
from geopost.db.session import Base

# Import all models below
from geopost.modules.user_management.models.user import User
from geopost.modules.friendships.models.friendship import Friendship, FriendshipRequest
from geopost.modules.groups.models.group import Group, GroupMembership
from geopost.modules.posts.models.post import Post
from geopost.modules.posts.comments.models.comment import Comment
from geopost.modules.locations.models.location import Location
from geopost.modules.tags.models.tag import Tag
