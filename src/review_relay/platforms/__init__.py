from .base import GitPlatform
from .azure import AzureDevOpsClient
from .bitbucket import BitbucketClient
from .github import GitHubClient

__all__ = ["GitPlatform", "AzureDevOpsClient", "BitbucketClient", "GitHubClient"]
