"""BucketList - a private map of the places you want to visit."""
