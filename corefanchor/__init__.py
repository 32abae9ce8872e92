from corefanchor.resolver import PostCorefResolver
