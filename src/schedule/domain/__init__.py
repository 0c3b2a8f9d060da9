"""Domain: исключения и интерфейсы домена Schedule."""
